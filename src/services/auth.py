"""Authentication service: registration, login, password reset and logout."""

import logging
import re

from fastapi import Response

from src.config import get_settings
from src.models.user import USERNAME_MAX_LENGTH, User
from src.schemas.auth import LoginForm, RegisterForm, ResetPasswordForm, SessionData
from src.services.exceptions import CredentialConflict, FieldValidationError, InvalidCredentials
from src.services.passwords import (
    MAX_PASSWORD_BYTES,
    dummy_verify,
    get_password_hash,
    password_too_long,
    verify_password,
)
from src.services.sessions import SessionManager
from src.services.user_store import UserStore

logger = logging.getLogger(__name__)
settings = get_settings()

USERNAME_PATTERN = re.compile(r"[A-Za-z0-9_]+")

USERNAME_REQUIRED = "Please enter a username."
USERNAME_INVALID = "Username can only contain letters, numbers, and underscores."
USERNAME_TOO_LONG = f"Username must be at most {USERNAME_MAX_LENGTH} characters."
USERNAME_TAKEN = CredentialConflict.message
PASSWORD_REQUIRED = "Please enter a password."
NEW_PASSWORD_REQUIRED = "Please enter the new password."
CONFIRM_REQUIRED = "Please confirm password."
PASSWORD_MISMATCH = "Password did not match."
PASSWORD_TOO_LONG = f"Password must be at most {MAX_PASSWORD_BYTES} bytes."


def password_too_short_message(min_length: int) -> str:
    return f"Password must have at least {min_length} characters."


def validate_username(username: str) -> str | None:
    """Return an error message for a malformed username, or None."""
    if not username:
        return USERNAME_REQUIRED
    if not USERNAME_PATTERN.fullmatch(username):
        return USERNAME_INVALID
    if len(username) > USERNAME_MAX_LENGTH:
        return USERNAME_TOO_LONG
    return None


def validate_new_password(
    password: str,
    confirm_password: str,
    *,
    min_length: int,
    required_message: str = PASSWORD_REQUIRED,
    field: str = "password",
) -> dict[str, str]:
    """Check a new password and its confirmation.

    The confirmation is only compared when the password itself is acceptable,
    and an empty confirmation is reported separately from a mismatch.
    """
    errors: dict[str, str] = {}
    if not password:
        errors[field] = required_message
    elif len(password) < min_length:
        errors[field] = password_too_short_message(min_length)
    elif password_too_long(password):
        errors[field] = PASSWORD_TOO_LONG

    if not confirm_password:
        errors["confirm_password"] = CONFIRM_REQUIRED
    elif field not in errors and password != confirm_password:
        errors["confirm_password"] = PASSWORD_MISMATCH
    return errors


class AuthService:
    """Orchestrates the credential store, password hasher and session manager."""

    def __init__(
        self,
        users: UserStore,
        sessions: SessionManager,
        min_password_length: int | None = None,
    ):
        self.users = users
        self.sessions = sessions
        self.min_password_length = min_password_length or settings.min_password_length

    def register(self, form: RegisterForm) -> User:
        """Create a new account.

        Raises:
            FieldValidationError: with every failing field; the username is kept for re-display
            StoreError: if the store fails
        """
        errors: dict[str, str] = {}
        username_error = validate_username(form.username)
        if username_error:
            errors["username"] = username_error
        errors.update(
            validate_new_password(
                form.password,
                form.confirm_password,
                min_length=self.min_password_length,
            )
        )

        if "username" not in errors and self.users.find_by_username(form.username) is not None:
            errors["username"] = USERNAME_TAKEN

        if errors:
            raise FieldValidationError(errors, values={"username": form.username})

        try:
            user = self.users.insert_user(form.username, get_password_hash(form.password))
        except CredentialConflict as e:
            # Lost a race with a concurrent registration
            raise FieldValidationError(
                {"username": USERNAME_TAKEN}, values={"username": form.username}
            ) from e

        logger.info(f"Registered user {user.id} ({user.username})")
        return user

    def login(self, form: LoginForm, response: Response) -> SessionData:
        """Check credentials and start a session bound to the response.

        Unknown usernames and wrong passwords raise the same InvalidCredentials.
        """
        errors: dict[str, str] = {}
        if not form.username:
            errors["username"] = USERNAME_REQUIRED
        if not form.password:
            errors["password"] = PASSWORD_REQUIRED
        if errors:
            raise FieldValidationError(errors, values={"username": form.username})

        user = self.users.find_by_username(form.username)
        if user is None:
            dummy_verify()
        if user is None or not verify_password(form.password, user.password_hash):
            logger.info("Failed login attempt")
            raise InvalidCredentials()

        session = self.sessions.create(response, user.id, user.username)
        logger.info(f"User {user.id} logged in")
        return session

    def reset_password(
        self,
        session: SessionData,
        form: ResetPasswordForm,
        response: Response,
    ) -> None:
        """Replace the logged-in user's password, then end the session.

        The caller is expected to have passed the page guard already.
        """
        errors = validate_new_password(
            form.new_password,
            form.confirm_password,
            min_length=self.min_password_length,
            required_message=NEW_PASSWORD_REQUIRED,
            field="new_password",
        )
        if errors:
            raise FieldValidationError(errors)

        self.users.update_password_hash(session.user_id, get_password_hash(form.new_password))
        self.sessions.destroy(response, session.session_id)
        logger.info(f"User {session.user_id} reset their password")

    def logout(self, token: str | None, response: Response) -> None:
        """End the session, whatever state it is in."""
        self.sessions.destroy(response, token)
        logger.info("Session logged out")
