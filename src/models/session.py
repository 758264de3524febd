"""Server-side login session model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class UserSession(Base, TimestampMixin):
    """An authenticated session, keyed by the SHA-256 digest of the cookie token.

    A row only exists while the session is authenticated, so user_id and
    username are always both present.
    """

    __tablename__ = "user_sessions"

    id = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    username = Column(String(50), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    # Relationships
    user = relationship("User", back_populates="sessions")
