"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import RedirectResponse

from src.api import auth
from src.config import get_settings
from src.services.exceptions import LoginRequired, StoreError

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Starting login service ({settings.environment})")
    yield
    logger.info("Login service shutting down")


app = FastAPI(
    title="Login System",
    description="Username/password registration, login and session-gated pages",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    """Send unauthenticated clients to the login page."""
    return RedirectResponse(url=auth.LOGIN_PAGE, status_code=status.HTTP_303_SEE_OTHER)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    """Show a generic failure page; the cause was already logged by the store."""
    return auth.templates.TemplateResponse(
        request,
        "error.html",
        {"message": exc.message},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# Register routers
app.include_router(auth.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
