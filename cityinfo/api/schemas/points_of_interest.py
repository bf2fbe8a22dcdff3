"""Transfer objects for points of interest."""

from pydantic import Field, field_validator

from cityinfo.api.schemas.base import CamelModel
from cityinfo.core.constants import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH

NAME_REQUIRED_MESSAGE = "You should provide a name value."


class PointOfInterestResponse(CamelModel):
    """A point of interest as returned to clients."""

    id: int
    name: str
    description: str | None = None


class _PointOfInterestInput(CamelModel):
    name: str = Field(..., max_length=NAME_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)

    @field_validator("name", mode="before")
    @classmethod
    def name_not_blank(cls, v: object) -> object:
        """Reject missing, empty and whitespace-only names."""
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError(NAME_REQUIRED_MESSAGE)
        return v


class PointOfInterestCreate(_PointOfInterestInput):
    """Body of a create request."""


class PointOfInterestUpdate(_PointOfInterestInput):
    """Full replacement of a point of interest's mutable fields.

    Also the document JSON Patch operations are applied to. An omitted
    description resets the stored one.
    """
