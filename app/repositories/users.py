"""Credential store: persistence of user accounts. Lookups only see active users."""

from sqlalchemy.orm import Session

from app.models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> User | None:
        return (
            self.db.query(User)
            .filter(User.id == user_id, User.is_active.is_(True))
            .first()
        )

    def get_by_username(self, username: str) -> User | None:
        return (
            self.db.query(User)
            .filter(User.username == username, User.is_active.is_(True))
            .first()
        )

    def exists_by_username(self, username: str) -> bool:
        return self.get_by_username(username) is not None

    def create(self, username: str, password_hash: str) -> User:
        """
        Insert an active user and commit.

        Raises sqlalchemy.exc.IntegrityError if another active user with the same
        username was committed first; the session is rolled back before re-raising.
        """
        user = User(username=username, password_hash=password_hash, is_active=True)
        self.db.add(user)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(user)
        return user

    def deactivate(self, user_id: int) -> bool:
        """Soft delete: mark the user inactive. Returns False if no active user matched."""
        user = self.get_by_id(user_id)
        if user is None:
            return False
        user.is_active = False
        self.db.commit()
        return True
