"""Tests for settings validation and engine options."""

import pytest
from pydantic import ValidationError

from src.config import Settings
from src.database import build_engine_options

PG_URL = "postgresql://app:pw@db.internal/auth"


class TestCookieSettings:
    """Tests for session cookie validation."""

    def test_samesite_none_requires_secure(self):
        """Test SameSite=None is refused on an insecure cookie."""
        with pytest.raises(ValidationError, match="SESSION_COOKIE_SECURE"):
            Settings(session_cookie_samesite="none", session_cookie_secure=False)

    def test_samesite_none_with_secure(self):
        settings = Settings(session_cookie_samesite="none", session_cookie_secure=True)
        assert settings.session_cookie_samesite == "none"

    @pytest.mark.parametrize("samesite", ["lax", "strict"])
    def test_other_samesite_values_allow_insecure(self, samesite):
        settings = Settings(session_cookie_samesite=samesite, session_cookie_secure=False)
        assert settings.session_cookie_samesite == samesite


class TestProductionSettings:
    """Tests for the production checks."""

    def test_insecure_cookie_rejected(self):
        """Test production refuses a cookie sent over plain HTTP."""
        with pytest.raises(ValidationError, match="SESSION_COOKIE_SECURE"):
            Settings(environment="production", database_url=PG_URL, session_cookie_secure=False)

    def test_localhost_database_rejected(self):
        with pytest.raises(ValidationError, match="localhost"):
            Settings(
                environment="production",
                database_url="postgresql://app:pw@localhost/auth",
                session_cookie_secure=True,
            )

    def test_valid_production_settings(self):
        settings = Settings(environment="production", database_url=PG_URL, session_cookie_secure=True)
        assert settings.is_production


def test_database_url_built_from_parts():
    """Test the URL is assembled from host, user, password and name."""
    settings = Settings(
        database_url=None, db_host="db", db_user="app", db_password="pw", db_name="auth"
    )
    assert settings.database_url == "postgresql://app:pw@db/auth"


class TestEngineOptions:
    """Tests for build_engine_options."""

    def test_sqlite_skips_pool_sizing(self):
        options = build_engine_options(Settings(database_url="sqlite:///./test.db"))

        assert options["connect_args"] == {"check_same_thread": False}
        assert "pool_size" not in options
        assert "max_overflow" not in options

    def test_server_database_uses_pool_settings(self):
        """Test pool size, overflow and echo come from settings."""
        options = build_engine_options(
            Settings(database_url=PG_URL, db_pool_size=3, db_max_overflow=7, db_echo=True)
        )

        assert options["pool_size"] == 3
        assert options["max_overflow"] == 7
        assert options["echo"] is True
        assert options["pool_pre_ping"] is True
        assert "connect_args" not in options
