"""Unit tests for token issuance and validation."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt
from pytest_mock import MockerFixture

from cityinfo.core.config import AuthConfig
from cityinfo.core.exceptions import UnauthorizedError
from cityinfo.services.authentication import (
    AuthenticatedUser,
    DemoCredentialValidator,
    TokenService,
    get_token_service,
)


@pytest.mark.unit
class TestCreateToken:
    def test_claims(
        self,
        token_service: TokenService,
        auth_config: AuthConfig,
        berlin_user: AuthenticatedUser,
    ) -> None:
        issued_at = datetime.now(UTC).replace(microsecond=0)

        token = token_service.create_token(berlin_user, issued_at=issued_at)
        claims = jwt.get_unverified_claims(token)

        assert claims["sub"] == "1"
        assert claims["given_name"] == "Bogdan"
        assert claims["family_name"] == "Polojan"
        assert claims["city"] == "Berlin"
        assert claims["iss"] == auth_config.issuer
        assert claims["aud"] == auth_config.audience
        assert claims["exp"] - claims["nbf"] == 3600
        assert jwt.get_unverified_header(token)["alg"] == "HS256"

    def test_round_trip(
        self, token_service: TokenService, antwerp_user: AuthenticatedUser
    ) -> None:
        claims = token_service.decode_token(token_service.create_token(antwerp_user))

        assert claims["sub"] == "2"
        assert claims["city"] == "Antwerp"


@pytest.mark.unit
class TestDecodeToken:
    def test_expired(
        self, token_service: TokenService, berlin_user: AuthenticatedUser
    ) -> None:
        token = token_service.create_token(
            berlin_user, issued_at=datetime.now(UTC) - timedelta(hours=2)
        )

        with pytest.raises(UnauthorizedError, match="expired"):
            token_service.decode_token(token)

    def test_not_yet_valid(
        self, token_service: TokenService, berlin_user: AuthenticatedUser
    ) -> None:
        token = token_service.create_token(
            berlin_user, issued_at=datetime.now(UTC) + timedelta(minutes=30)
        )

        with pytest.raises(UnauthorizedError):
            token_service.decode_token(token)

    @pytest.mark.parametrize(
        "override",
        [
            {"audience": "someotherapi"},
            {"issuer": "https://evil.test"},
            {"secret_for_key": "another-signing-secret-with-enough-length"},
        ],
    )
    def test_foreign_tokens_rejected(
        self,
        auth_config: AuthConfig,
        token_service: TokenService,
        berlin_user: AuthenticatedUser,
        override: dict[str, str],
    ) -> None:
        foreign = TokenService(
            auth_config.model_copy(update=override), DemoCredentialValidator()
        )

        with pytest.raises(UnauthorizedError, match="Invalid bearer token"):
            token_service.decode_token(foreign.create_token(berlin_user))

    def test_tampered_token(
        self, token_service: TokenService, berlin_user: AuthenticatedUser
    ) -> None:
        header, payload, signature = token_service.create_token(berlin_user).split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"

        with pytest.raises(UnauthorizedError):
            token_service.decode_token(tampered)


@pytest.mark.unit
class TestAuthenticate:
    async def test_demo_validator_accepts_anyone(
        self, token_service: TokenService
    ) -> None:
        token = await token_service.authenticate("anyone", None)

        assert token is not None
        claims = token_service.decode_token(token)
        assert claims["city"] == "Berlin"
        assert claims["given_name"] == "Bogdan"

    async def test_rejected_credentials(
        self, auth_config: AuthConfig, mocker: MockerFixture
    ) -> None:
        validator = mocker.Mock()
        validator.validate = mocker.AsyncMock(return_value=None)
        service = TokenService(auth_config, validator)

        assert await service.authenticate("bogdan", "wrong") is None
        validator.validate.assert_awaited_once_with("bogdan", "wrong")

    def test_dependency_uses_settings(self) -> None:
        service = get_token_service(DemoCredentialValidator())

        assert isinstance(service, TokenService)
