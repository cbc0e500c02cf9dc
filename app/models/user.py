"""ORM model for application users (credential store)."""

from sqlalchemy import Boolean, Column, Index, Integer, String, text, true

from app.models.base import Base


class User(Base):
    """
    User account for JWT authentication.

    Users are never physically deleted; deactivation flips is_active. A username
    is unique among active users (partial unique index), so a deactivated
    account's name can be registered again.
    """

    __tablename__ = "users"
    __table_args__ = (
        Index(
            "uq_users_username_active",
            "username",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r} active={self.is_active}>"
