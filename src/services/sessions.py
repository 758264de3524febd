"""Server-side session storage bound to a cookie."""

import hashlib
import logging
import secrets
from datetime import UTC, datetime, timedelta

from fastapi import Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.config import Settings, get_settings
from src.models.session import UserSession
from src.schemas.auth import SessionData
from src.services.exceptions import StoreError

logger = logging.getLogger(__name__)

# Any instant in the past; tells the client to drop the cookie
EXPIRED = datetime(1970, 1, 1, tzinfo=UTC)


def _digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class SessionManager:
    """Creates, loads and destroys sessions.

    The client only ever holds the opaque token; the table stores its digest.
    """

    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()

    def create(self, response: Response, user_id: int, username: str) -> SessionData:
        """Start a new authenticated session and set its cookie on the response."""
        self.purge_expired()

        token = secrets.token_urlsafe(32)
        expires_at = datetime.now(UTC) + timedelta(minutes=self.settings.session_lifetime_minutes)
        row = UserSession(
            id=_digest(token),
            user_id=user_id,
            username=username,
            expires_at=expires_at,
        )
        self.db.add(row)
        self._commit("creating session")

        response.set_cookie(
            key=self.settings.session_cookie_name,
            value=token,
            max_age=self.settings.session_lifetime_seconds,
            path=self.settings.session_cookie_path,
            domain=self.settings.session_cookie_domain,
            secure=self.settings.session_cookie_secure,
            httponly=self.settings.session_cookie_httponly,
            samesite=self.settings.session_cookie_samesite,
        )
        logger.debug(f"Created session for user {user_id}")
        return SessionData(session_id=token, user_id=user_id, username=username)

    def load(self, token: str | None) -> SessionData | None:
        """Resolve a cookie token to its session, or None if absent/unknown/expired."""
        if not token:
            return None
        try:
            row = (
                self.db.query(UserSession)
                .filter(
                    UserSession.id == _digest(token),
                    UserSession.expires_at > datetime.now(UTC),
                )
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Database error loading session")
            raise StoreError() from e

        if row is None:
            return None
        return SessionData(session_id=token, user_id=row.user_id, username=row.username)

    def destroy(self, response: Response, token: str | None) -> None:
        """Remove the session server-side and expire the client cookie.

        Safe to call with a missing or unknown token.
        """
        if token:
            try:
                deleted = (
                    self.db.query(UserSession)
                    .filter(UserSession.id == _digest(token))
                    .delete(synchronize_session=False)
                )
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.exception("Database error destroying session")
                raise StoreError() from e
            self._commit("destroying session")
            if deleted:
                logger.debug("Destroyed session")

        response.set_cookie(
            key=self.settings.session_cookie_name,
            value="",
            max_age=0,
            expires=EXPIRED,
            path=self.settings.session_cookie_path,
            domain=self.settings.session_cookie_domain,
            secure=self.settings.session_cookie_secure,
            httponly=self.settings.session_cookie_httponly,
            samesite=self.settings.session_cookie_samesite,
        )

    def purge_expired(self) -> int:
        """Delete expired sessions and return how many were removed."""
        try:
            removed = (
                self.db.query(UserSession)
                .filter(UserSession.expires_at <= datetime.now(UTC))
                .delete(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Database error purging expired sessions")
            raise StoreError() from e
        self._commit("purging expired sessions")
        if removed:
            logger.info(f"Purged {removed} expired sessions")
        return removed

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Database error {action}")
            raise StoreError() from e
