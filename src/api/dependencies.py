"""FastAPI dependencies for authentication and database."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from src.config import get_settings
from src.database import get_db
from src.schemas.auth import AuthenticatedContext, SessionData
from src.services.auth import AuthService
from src.services.guard import require_session
from src.services.sessions import SessionManager
from src.services.user_store import UserStore

settings = get_settings()


def get_session_token(request: Request) -> str | None:
    """Read the session token from the request cookie."""
    return request.cookies.get(settings.session_cookie_name)


def get_session_manager(
    db: Annotated[Session, Depends(get_db)],
) -> SessionManager:
    """Get session manager bound to the request's database session."""
    return SessionManager(db, settings)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
) -> AuthService:
    """Get auth service with dependencies."""
    return AuthService(UserStore(db), sessions)


def get_current_session(
    token: Annotated[str | None, Depends(get_session_token)],
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
) -> SessionData | None:
    """Get the current session, or None if the client is not logged in."""
    return sessions.load(token)


def get_authenticated_context(
    session: Annotated[SessionData | None, Depends(get_current_session)],
) -> AuthenticatedContext:
    """Page guard: raises LoginRequired unless the session is authenticated."""
    return require_session(session)
