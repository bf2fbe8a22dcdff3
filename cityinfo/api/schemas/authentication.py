"""Transfer objects for token issuance."""

from pydantic import Field

from cityinfo.api.schemas.base import CamelModel


class AuthenticationRequest(CamelModel):
    """Credentials exchanged for a bearer token."""

    user_name: str | None = Field(default=None, examples=["bogdan"])
    password: str | None = Field(default=None, examples=["secret"])
