"""Pydantic schemas."""

from src.schemas.auth import (
    AuthenticatedContext,
    LoginForm,
    RegisterForm,
    ResetPasswordForm,
    SessionData,
)

__all__ = [
    "AuthenticatedContext",
    "LoginForm",
    "RegisterForm",
    "ResetPasswordForm",
    "SessionData",
]
