"""Authentication pages: register, login, welcome, reset password, logout."""

from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from src.api.dependencies import (
    get_auth_service,
    get_authenticated_context,
    get_current_session,
    get_session_token,
)
from src.schemas.auth import (
    AuthenticatedContext,
    LoginForm,
    RegisterForm,
    ResetPasswordForm,
    SessionData,
)
from src.services.auth import AuthService
from src.services.exceptions import FieldValidationError, InvalidCredentials

router = APIRouter(tags=["auth"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

LOGIN_PAGE = "/login"
WELCOME_PAGE = "/welcome"


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


def _render(
    request: Request,
    template: str,
    *,
    errors: dict[str, str] | None = None,
    values: dict[str, str] | None = None,
    general_error: str | None = None,
    status_code: int = status.HTTP_200_OK,
    **context,
) -> HTMLResponse:
    """Render a form page. Password fields are never passed back."""
    return templates.TemplateResponse(
        request,
        template,
        {
            "errors": errors or {},
            "values": values or {},
            "general_error": general_error,
            **context,
        },
        status_code=status_code,
    )


@router.get("/")
def index():
    """Send visitors to the welcome page (which sends them on to login if needed)."""
    return _redirect(WELCOME_PAGE)


@router.get("/register", response_class=HTMLResponse)
def register_page(request: Request):
    """Show the sign-up form."""
    return _render(request, "register.html")


@router.post("/register", response_class=HTMLResponse)
def register(
    request: Request,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    confirm_password: Annotated[str, Form()] = "",
):
    """Create an account and continue to the login page."""
    form = RegisterForm(username=username, password=password, confirm_password=confirm_password)
    try:
        auth.register(form)
    except FieldValidationError as e:
        return _render(
            request,
            "register.html",
            errors=e.errors,
            values=e.values,
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    return _redirect(LOGIN_PAGE)


@router.get("/login", response_class=HTMLResponse)
def login_page(
    request: Request,
    session: Annotated[SessionData | None, Depends(get_current_session)],
):
    """Show the login form, or skip it for clients that are already logged in."""
    if session is not None:
        return _redirect(WELCOME_PAGE)
    return _render(request, "login.html")


@router.post("/login", response_class=HTMLResponse)
def login(
    request: Request,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
):
    """Log in and continue to the welcome page."""
    form = LoginForm(username=username, password=password)
    response = _redirect(WELCOME_PAGE)
    try:
        auth.login(form, response)
    except FieldValidationError as e:
        return _render(
            request,
            "login.html",
            errors=e.errors,
            values=e.values,
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except InvalidCredentials as e:
        return _render(
            request,
            "login.html",
            values={"username": form.username},
            general_error=e.message,
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return response


@router.get("/welcome", response_class=HTMLResponse)
def welcome(
    request: Request,
    context: Annotated[AuthenticatedContext, Depends(get_authenticated_context)],
):
    """Greet the logged-in user."""
    return _render(request, "welcome.html", username=context.username)


@router.get("/reset-password", response_class=HTMLResponse)
def reset_password_page(
    request: Request,
    context: Annotated[AuthenticatedContext, Depends(get_authenticated_context)],
):
    """Show the password reset form."""
    return _render(request, "reset_password.html", username=context.username)


@router.post("/reset-password", response_class=HTMLResponse)
def reset_password(
    request: Request,
    context: Annotated[AuthenticatedContext, Depends(get_authenticated_context)],
    session: Annotated[SessionData, Depends(get_current_session)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
    new_password: Annotated[str, Form()] = "",
    confirm_password: Annotated[str, Form()] = "",
):
    """Change the password, end the session and continue to the login page."""
    form = ResetPasswordForm(new_password=new_password, confirm_password=confirm_password)
    response = _redirect(LOGIN_PAGE)
    try:
        auth.reset_password(session, form, response)
    except FieldValidationError as e:
        return _render(
            request,
            "reset_password.html",
            errors=e.errors,
            username=context.username,
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    return response


@router.api_route("/logout", methods=["GET", "POST"])
def logout(
    token: Annotated[str | None, Depends(get_session_token)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
):
    """Log out and return to the login page."""
    response = _redirect(LOGIN_PAGE)
    auth.logout(token, response)
    return response
