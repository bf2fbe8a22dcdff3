"""Transfer objects for cities."""

from pydantic import Field, computed_field

from cityinfo.api.schemas.base import CamelModel
from cityinfo.api.schemas.points_of_interest import PointOfInterestResponse


class CityWithoutPointsOfInterestResponse(CamelModel):
    """A city without its points of interest (list view)."""

    id: int
    name: str
    description: str | None = None


class CityResponse(CityWithoutPointsOfInterestResponse):
    """A city with its points of interest."""

    points_of_interest: list[PointOfInterestResponse] = Field(default_factory=list)

    @computed_field(alias="numberOfPointsOfInterest")  # type: ignore[prop-decorator]
    @property
    def number_of_points_of_interest(self) -> int:
        """Number of points of interest the city has."""
        return len(self.points_of_interest)
