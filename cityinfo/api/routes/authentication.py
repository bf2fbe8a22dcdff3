"""Token issuance endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from cityinfo.api.schemas.authentication import AuthenticationRequest
from cityinfo.core.exceptions import UnauthorizedError
from cityinfo.services.authentication import TokenService, get_token_service

router = APIRouter(prefix="/authentication", tags=["authentication"])


@router.post(
    "/authenticate",
    response_class=PlainTextResponse,
    summary="Exchange credentials for a bearer token",
)
async def authenticate(
    credentials: AuthenticationRequest,
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> PlainTextResponse:
    """Return a signed token, valid for one hour, as plain text."""
    token = await token_service.authenticate(
        credentials.user_name, credentials.password
    )
    if token is None:
        raise UnauthorizedError("Invalid credentials")
    return PlainTextResponse(token)
