"""
Manage user accounts from the shell. Run from project root:
  python -m app.scripts.manage_users create USERNAME PASSWORD
  python -m app.scripts.manage_users deactivate USERNAME
Deactivation is a soft delete: the account can no longer log in and its
username becomes available for registration again.
"""
import argparse
import sys

from sqlalchemy.exc import IntegrityError

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.logging_config import configure_logging
from app.core.security import hash_password
from app.repositories.users import UserRepository
from app.schemas.auth import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create or deactivate catalog users.")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Create an active user")
    create.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    create.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")

    deactivate = sub.add_parser("deactivate", help="Soft-delete an active user")
    deactivate.add_argument("username")
    return parser


def _create(repo: UserRepository, username: str, password: str) -> int:
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1
    if repo.exists_by_username(username):
        print(f"User '{username}' already exists.", file=sys.stderr)
        return 1
    try:
        user = repo.create(username=username, password_hash=hash_password(password))
    except IntegrityError:
        print(f"User '{username}' already exists.", file=sys.stderr)
        return 1
    print(f"Created user '{username}' (id={user.id}).")
    return 0


def _deactivate(repo: UserRepository, username: str) -> int:
    user = repo.get_by_username(username)
    if user is None or not repo.deactivate(user.id):
        print(f"No active user '{username}'.", file=sys.stderr)
        return 1
    print(f"Deactivated user '{username}'.")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(get_settings().LOG_LEVEL)

    db = SessionLocal()
    try:
        repo = UserRepository(db)
        username = args.username.strip()
        if args.command == "create":
            return _create(repo, username, args.password)
        return _deactivate(repo, username)
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
