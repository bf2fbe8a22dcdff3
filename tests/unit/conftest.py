"""Shared fixtures for unit tests."""

from typing import cast

import pytest
from pytest_mock import MockerFixture, MockType

from cityinfo.core.config import AuthConfig, Settings
from cityinfo.services.authentication import (
    AuthenticatedUser,
    DemoCredentialValidator,
    TokenService,
)


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Provide a real Settings object built from test environment variables.

    Returns:
        Settings: Settings with test defaults.
    """
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("APP_VERSION", "1.0.0")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("API_HOST", "127.0.0.1")
    monkeypatch.setenv("API_PORT", "3000")
    return Settings()


@pytest.fixture
def mock_app(mocker: MockerFixture) -> MockType:
    """Provide a mock ASGI app for middleware construction."""
    app = mocker.Mock()
    app.__name__ = "mock_app"
    return cast("MockType", app)


@pytest.fixture
def mock_uvicorn(mocker: MockerFixture) -> MockType:
    """Mock uvicorn.run to prevent server startup."""
    return mocker.patch("uvicorn.run")


@pytest.fixture
def auth_config() -> AuthConfig:
    """Token settings with a known secret."""
    return AuthConfig(
        secret_for_key="unit-test-signing-secret-with-enough-length",
        issuer="https://issuer.test",
        audience="cityinfoapi",
    )


@pytest.fixture
def token_service(auth_config: AuthConfig) -> TokenService:
    """Token service backed by the demo credential validator."""
    return TokenService(auth_config, DemoCredentialValidator())


@pytest.fixture
def berlin_user() -> AuthenticatedUser:
    return AuthenticatedUser(
        user_id=1,
        user_name="bogdan",
        first_name="Bogdan",
        last_name="Polojan",
        city="Berlin",
    )


@pytest.fixture
def antwerp_user() -> AuthenticatedUser:
    return AuthenticatedUser(
        user_id=2,
        user_name="kevin",
        first_name="Kevin",
        last_name="Dockx",
        city="Antwerp",
    )
