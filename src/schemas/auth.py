"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict


class FormModel(BaseModel):
    """Base for submitted forms; surrounding whitespace is stripped from every field."""

    model_config = ConfigDict(str_strip_whitespace=True)


class RegisterForm(FormModel):
    """Sign-up form."""

    username: str = ""
    password: str = ""
    confirm_password: str = ""


class LoginForm(FormModel):
    """Login form."""

    username: str = ""
    password: str = ""


class ResetPasswordForm(FormModel):
    """Password reset form for the logged-in user."""

    new_password: str = ""
    confirm_password: str = ""


class SessionData(BaseModel):
    """An authenticated session as seen by the application."""

    session_id: str
    user_id: int
    username: str
    authenticated: bool = True


class AuthenticatedContext(BaseModel):
    """Identity handed to a protected page."""

    user_id: int
    username: str
