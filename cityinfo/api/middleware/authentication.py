"""Bearer token authentication and claim-based authorization.

Authentication and authorization run as FastAPI dependencies, ahead of the
route handler:

- ``get_current_user`` reads ``Authorization: Bearer <token>``, validates the
  token and exposes its claims. Missing or invalid tokens end in 401.
- ``require_policy(name)`` additionally checks the claims a named policy
  demands. Failing the policy ends in 403.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Annotated, Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger

from cityinfo.api.constants import MUST_LIVE_IN_BERLIN
from cityinfo.core.context import RequestContext
from cityinfo.core.exceptions import ForbiddenError, UnauthorizedError
from cityinfo.services.authentication import TokenService, get_token_service

# Required claim values per policy name
AUTHORIZATION_POLICIES: dict[str, dict[str, str]] = {
    MUST_LIVE_IN_BERLIN: {"city": "Berlin"},
}

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """The caller behind a validated bearer token."""

    subject: str
    claims: dict[str, Any] = field(default_factory=dict)

    def has_claim(self, claim_type: str, value: str) -> bool:
        """Whether the token carries ``claim_type`` with exactly ``value``."""
        return self.claims.get(claim_type) == value


async def get_current_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> AuthenticatedPrincipal:
    """Validate the bearer token of the current request.

    Raises:
        UnauthorizedError: If no token was sent or it fails validation.
    """
    if credentials is None:
        raise UnauthorizedError("Missing bearer token")

    claims = token_service.decode_token(credentials.credentials)
    subject = str(claims.get("sub", ""))
    RequestContext.set_subject(subject)
    logger.debug("Authenticated request", subject=subject)

    return AuthenticatedPrincipal(subject=subject, claims=claims)


CurrentUser = Annotated[AuthenticatedPrincipal, Depends(get_current_user)]


def require_policy(
    policy_name: str,
) -> Callable[[AuthenticatedPrincipal], Awaitable[AuthenticatedPrincipal]]:
    """Build a dependency enforcing a named authorization policy.

    Args:
        policy_name: Key of ``AUTHORIZATION_POLICIES``.

    Returns:
        A dependency that returns the principal when every required claim
        matches and raises ``ForbiddenError`` otherwise.

    Raises:
        KeyError: If the policy is not defined.
    """
    required_claims = AUTHORIZATION_POLICIES[policy_name]

    async def enforce_policy(user: CurrentUser) -> AuthenticatedPrincipal:
        for claim_type, value in required_claims.items():
            if not user.has_claim(claim_type, value):
                raise ForbiddenError(
                    f"Policy '{policy_name}' requires claim '{claim_type}'",
                    context={"policy": policy_name, "subject": user.subject},
                )
        return user

    return enforce_policy
