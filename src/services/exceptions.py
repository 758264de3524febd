"""Error taxonomy for the authentication flow."""

GENERIC_ERROR_MESSAGE = "Oops! Something went wrong. Please try again later."


class AuthError(Exception):
    """Base class for authentication errors. ``message`` is safe to show users."""

    message = GENERIC_ERROR_MESSAGE

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class FieldValidationError(AuthError):
    """One or more form fields failed validation.

    Args:
        errors: Field name -> message shown next to that input
        values: Non-secret values to re-display in the form
    """

    message = "Please correct the errors below."

    def __init__(self, errors: dict[str, str], values: dict[str, str] | None = None):
        super().__init__()
        self.errors = errors
        self.values = values or {}


class CredentialConflict(AuthError):
    """The username is already taken (unique constraint at the store)."""

    message = "This username is already taken."


class InvalidCredentials(AuthError):
    """Unknown username or wrong password; the two are indistinguishable."""

    message = "Invalid username or password."


class StoreError(AuthError):
    """The credential or session store failed. Details are logged, never shown."""


class LoginRequired(AuthError):
    """No authenticated session; the client must be sent to the login page."""

    message = "Please log in to continue."
