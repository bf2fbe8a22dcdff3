"""Credential validation and bearer token issuance.

Tokens are compact JWS documents signed with HMAC-SHA256. They carry the
caller's identity claims (``sub``, ``given_name``, ``family_name``, ``city``)
plus ``iss``, ``aud``, ``nbf`` and ``exp``, and are valid for one hour.

Credential checking sits behind the ``CredentialValidator`` protocol. The
default ``DemoCredentialValidator`` accepts every request and stands in until
a real identity store is wired in.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Annotated, Any, Protocol

from fastapi import Depends
from jose import ExpiredSignatureError, JWTError, jwt
from loguru import logger

from cityinfo.core.config import AuthConfig, get_settings
from cityinfo.core.constants import TOKEN_ALGORITHM, TOKEN_LIFETIME
from cityinfo.core.exceptions import UnauthorizedError


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity of a caller whose credentials were accepted."""

    user_id: int
    user_name: str
    first_name: str
    last_name: str
    city: str


class CredentialValidator(Protocol):
    """Checks a user name and password against an identity store."""

    async def validate(
        self, user_name: str | None, password: str | None
    ) -> AuthenticatedUser | None:
        """Return the matching user, or None when the credentials are rejected."""
        ...


class DemoCredentialValidator:
    """Accepts any credentials and returns a fixed demo user living in Berlin."""

    async def validate(
        self, user_name: str | None, _password: str | None
    ) -> AuthenticatedUser | None:
        return AuthenticatedUser(
            user_id=1,
            user_name=user_name or "",
            first_name="Bogdan",
            last_name="Polojan",
            city="Berlin",
        )


class TokenService:
    """Issues and validates signed bearer tokens.

    Args:
        auth_config: Signing secret, issuer and audience.
        credential_validator: Identity check run before a token is issued.
    """

    def __init__(
        self, auth_config: AuthConfig, credential_validator: CredentialValidator
    ) -> None:
        self._config = auth_config
        self._credential_validator = credential_validator

    async def authenticate(
        self, user_name: str | None, password: str | None
    ) -> str | None:
        """Validate the credentials and issue a token for the user.

        Args:
            user_name: Name supplied by the caller.
            password: Password supplied by the caller.

        Returns:
            str | None: The encoded token, or None if the credentials were
                rejected.
        """
        user = await self._credential_validator.validate(user_name, password)
        if user is None:
            logger.warning("Rejected credentials", user_name=user_name)
            return None

        token = self.create_token(user)
        logger.info("Issued token", subject=str(user.user_id))
        return token

    def create_token(
        self, user: AuthenticatedUser, issued_at: datetime | None = None
    ) -> str:
        """Sign a token carrying the user's identity claims.

        Args:
            user: The authenticated user.
            issued_at: Start of the validity window. Defaults to now.

        Returns:
            str: The compact, signed token.
        """
        now = issued_at or datetime.now(UTC)
        claims = {
            "sub": str(user.user_id),
            "given_name": user.first_name,
            "family_name": user.last_name,
            "city": user.city,
            "iss": self._config.issuer,
            "aud": self._config.audience,
            "nbf": now,
            "exp": now + TOKEN_LIFETIME,
        }
        return jwt.encode(
            claims, self._config.secret_for_key, algorithm=TOKEN_ALGORITHM
        )

    def decode_token(self, token: str) -> dict[str, Any]:
        """Validate a token and return its claims.

        Signature, issuer, audience, expiry and not-before are all checked.

        Raises:
            UnauthorizedError: If the token fails any check.
        """
        try:
            return jwt.decode(
                token,
                self._config.secret_for_key,
                algorithms=[TOKEN_ALGORITHM],
                audience=self._config.audience,
                issuer=self._config.issuer,
            )
        except ExpiredSignatureError as e:
            raise UnauthorizedError("Token has expired", cause=e) from e
        except JWTError as e:
            raise UnauthorizedError("Invalid bearer token", cause=e) from e


def get_credential_validator() -> CredentialValidator:
    """Return the credential validator in use."""
    return DemoCredentialValidator()


def get_token_service(
    credential_validator: Annotated[
        CredentialValidator, Depends(get_credential_validator)
    ],
) -> TokenService:
    """Build the token service from the current settings."""
    return TokenService(get_settings().auth_config, credential_validator)
