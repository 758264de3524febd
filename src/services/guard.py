"""Page guard for protected pages."""

from src.schemas.auth import AuthenticatedContext, SessionData
from src.services.exceptions import LoginRequired


def require_session(session: SessionData | None) -> AuthenticatedContext:
    """Return the authenticated context, or raise LoginRequired."""
    if session is None or not session.authenticated:
        raise LoginRequired()
    if not session.user_id or not session.username:
        raise LoginRequired()
    return AuthenticatedContext(user_id=session.user_id, username=session.username)
