"""City endpoints. Both routes are open to anonymous callers."""

from typing import Annotated

from fastapi import APIRouter, Query, Response, status
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from cityinfo.api.constants import PAGINATION_HEADER
from cityinfo.api.mapping import to_city, to_city_without_points_of_interest
from cityinfo.api.middleware.error_handler import internal_server_error_response
from cityinfo.api.schemas.cities import (
    CityResponse,
    CityWithoutPointsOfInterestResponse,
)
from cityinfo.api.utils.negotiation import AcceptedMediaType, negotiated_response
from cityinfo.api.utils.parameters import ResourceId
from cityinfo.core.constants import (
    DEFAULT_CITIES_PAGE_SIZE,
    DEFAULT_PAGE_NUMBER,
    MAX_CITIES_PAGE_SIZE,
    MAX_PAGING_VALUE,
)
from cityinfo.infrastructure.database.dependencies import CityInfoRepositoryDep

router = APIRouter(prefix="/cities", tags=["cities"])


@router.get(
    "",
    response_model=list[CityWithoutPointsOfInterestResponse],
    summary="List cities",
)
async def get_cities(
    repository: CityInfoRepositoryDep,
    media_type: AcceptedMediaType,
    name: Annotated[str | None, Query(alias="filterbyname")] = None,
    search_query: Annotated[str | None, Query(alias="searchQuery")] = None,
    page_number: Annotated[
        int, Query(alias="pageNumber", ge=1, le=MAX_PAGING_VALUE)
    ] = DEFAULT_PAGE_NUMBER,
    page_size: Annotated[
        int, Query(alias="pageSize", ge=1, le=MAX_PAGING_VALUE)
    ] = DEFAULT_CITIES_PAGE_SIZE,
) -> Response:
    """Return one page of cities, without their points of interest.

    The page size is capped at 20. Paging details travel in the
    ``X-Pagination`` header.
    """
    page_size = min(page_size, MAX_CITIES_PAGE_SIZE)

    try:
        cities, pagination_metadata = await repository.list_cities(
            name, search_query, page_number, page_size
        )
    except SQLAlchemyError:
        logger.exception("Exception while getting cities")
        return internal_server_error_response()

    return negotiated_response(
        media_type,
        [to_city_without_points_of_interest(city) for city in cities],
        root_tag="cities",
        headers={PAGINATION_HEADER: pagination_metadata.to_header()},
    )


@router.get(
    "/{city_id}",
    response_model=CityResponse | CityWithoutPointsOfInterestResponse,
    responses={status.HTTP_404_NOT_FOUND: {"description": "City not found"}},
    summary="Get a city",
)
async def get_city(
    city_id: ResourceId,
    repository: CityInfoRepositoryDep,
    media_type: AcceptedMediaType,
    include_points_of_interest: Annotated[
        bool, Query(alias="includePointsOfInterest")
    ] = False,
) -> Response:
    """Return a city, with its points of interest when asked for."""
    try:
        city = await repository.get_city(city_id, include_points_of_interest)
    except SQLAlchemyError:
        logger.exception("Exception while getting city {}", city_id)
        return internal_server_error_response()

    if city is None:
        logger.info("City with id {} wasn't found.", city_id)
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    if include_points_of_interest:
        return negotiated_response(media_type, to_city(city), root_tag="city")
    return negotiated_response(
        media_type, to_city_without_points_of_interest(city), root_tag="city"
    )
