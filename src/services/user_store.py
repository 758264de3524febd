"""Credential store backed by the users table."""

import logging

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from src.models.user import User
from src.services.exceptions import CredentialConflict, StoreError

logger = logging.getLogger(__name__)


class UserStore:
    """Query surface over user records.

    Every statement goes through the ORM with bound parameters.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_username(self, username: str) -> User | None:
        """Return the user with exactly this username.

        More than one match is treated as no match.
        """
        try:
            users = self.db.query(User).filter(User.username == username).limit(2).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Database error looking up user")
            raise StoreError() from e

        if len(users) != 1:
            if users:
                logger.error(f"Multiple user rows for username {username!r}")
            return None
        return users[0]

    def insert_user(self, username: str, password_hash: str) -> User:
        """Insert a new user, raising CredentialConflict if the username exists."""
        user = User(username=username, password_hash=password_hash)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info(f"Username {username!r} rejected by unique constraint")
            raise CredentialConflict() from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Database error inserting user")
            raise StoreError() from e
        self.db.refresh(user)
        return user

    def update_password_hash(self, user_id: int, password_hash: str) -> None:
        """Replace the stored password hash for a user."""
        try:
            result = self.db.execute(
                update(User).where(User.id == user_id).values(password_hash=password_hash)
            )
            if result.rowcount != 1:
                self.db.rollback()
                logger.error(f"Password update matched {result.rowcount} rows for user {user_id}")
                raise StoreError()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Database error updating password for user {user_id}")
            raise StoreError() from e
