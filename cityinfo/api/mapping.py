"""Translation between ORM entities and transfer objects."""

from cityinfo.api.schemas.cities import (
    CityResponse,
    CityWithoutPointsOfInterestResponse,
)
from cityinfo.api.schemas.points_of_interest import (
    PointOfInterestCreate,
    PointOfInterestResponse,
    PointOfInterestUpdate,
)
from cityinfo.infrastructure.database.models import City, PointOfInterest


def to_city_without_points_of_interest(
    city: City,
) -> CityWithoutPointsOfInterestResponse:
    return CityWithoutPointsOfInterestResponse.model_validate(city)


def to_city(city: City) -> CityResponse:
    """Map a city whose points of interest were eagerly loaded."""
    return CityResponse(
        id=city.id,
        name=city.name,
        description=city.description,
        points_of_interest=[
            to_point_of_interest(point_of_interest)
            for point_of_interest in city.points_of_interest
        ],
    )


def to_point_of_interest(point_of_interest: PointOfInterest) -> PointOfInterestResponse:
    return PointOfInterestResponse.model_validate(point_of_interest)


def to_point_of_interest_entity(data: PointOfInterestCreate) -> PointOfInterest:
    """Create a new, not yet persisted, point of interest."""
    return PointOfInterest(name=data.name, description=data.description)


def to_point_of_interest_update(
    point_of_interest: PointOfInterest,
) -> PointOfInterestUpdate:
    """Materialize the update representation of a stored point of interest."""
    return PointOfInterestUpdate(
        name=point_of_interest.name, description=point_of_interest.description
    )


def apply_point_of_interest_update(
    data: PointOfInterestUpdate, point_of_interest: PointOfInterest
) -> None:
    """Overwrite every mutable field, including ones left unset in ``data``."""
    point_of_interest.name = data.name
    point_of_interest.description = data.description
