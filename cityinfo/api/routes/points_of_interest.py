"""Point of interest endpoints, nested under their city.

Every route requires the ``MustLiveInBerlin`` policy. A missing city or a
point of interest that does not belong to the requested city is answered
with an empty 404.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, Response, status
from loguru import logger
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from cityinfo.api.constants import MUST_LIVE_IN_BERLIN
from cityinfo.api.mapping import (
    apply_point_of_interest_update,
    to_point_of_interest,
    to_point_of_interest_entity,
    to_point_of_interest_update,
)
from cityinfo.api.middleware.authentication import require_policy
from cityinfo.api.middleware.error_handler import (
    create_error_response,
    internal_server_error_response,
    validation_error_details,
)
from cityinfo.api.schemas.points_of_interest import (
    PointOfInterestCreate,
    PointOfInterestResponse,
    PointOfInterestUpdate,
)
from cityinfo.api.utils.negotiation import AcceptedMediaType, negotiated_response
from cityinfo.api.utils.parameters import ResourceId
from cityinfo.api.utils.patching import PatchDocumentError, apply_patch
from cityinfo.core.exceptions import ErrorCode, Severity
from cityinfo.infrastructure.database.dependencies import CityInfoRepositoryDep
from cityinfo.services.notifications import MailService, get_mail_service

router = APIRouter(
    prefix="/cities/{city_id}/pointsofinterest",
    tags=["points of interest"],
    dependencies=[Depends(require_policy(MUST_LIVE_IN_BERLIN))],
)

NOT_FOUND_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_404_NOT_FOUND: {"description": "City or point of interest not found"}
}


def _not_found() -> Response:
    return Response(status_code=status.HTTP_404_NOT_FOUND)


@router.get(
    "",
    response_model=list[PointOfInterestResponse],
    responses=NOT_FOUND_RESPONSES,
    summary="List the points of interest of a city",
)
async def get_points_of_interest(
    city_id: ResourceId,
    repository: CityInfoRepositoryDep,
    media_type: AcceptedMediaType,
) -> Response:
    try:
        if not await repository.city_exists(city_id):
            logger.info(
                "City with id {} wasn't found when accessing points of interest.",
                city_id,
            )
            return _not_found()

        points_of_interest = await repository.list_points_of_interest(city_id)
    except SQLAlchemyError:
        logger.exception(
            "Exception while getting points of interest for city with id {}.",
            city_id,
        )
        return internal_server_error_response()

    return negotiated_response(
        media_type,
        [to_point_of_interest(point) for point in points_of_interest],
        root_tag="pointsOfInterest",
    )


@router.get(
    "/{point_of_interest_id}",
    name="get_point_of_interest",
    response_model=PointOfInterestResponse,
    responses=NOT_FOUND_RESPONSES,
    summary="Get a point of interest",
)
async def get_point_of_interest(
    city_id: ResourceId,
    point_of_interest_id: ResourceId,
    repository: CityInfoRepositoryDep,
    media_type: AcceptedMediaType,
) -> Response:
    try:
        if not await repository.city_exists(city_id):
            return _not_found()

        point_of_interest = await repository.get_point_of_interest(
            city_id, point_of_interest_id
        )
    except SQLAlchemyError:
        logger.exception(
            "Exception while getting point of interest {} for city with id {}.",
            point_of_interest_id,
            city_id,
        )
        return internal_server_error_response()

    if point_of_interest is None:
        return _not_found()

    return negotiated_response(
        media_type,
        to_point_of_interest(point_of_interest),
        root_tag="pointOfInterest",
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=PointOfInterestResponse,
    responses=NOT_FOUND_RESPONSES,
    summary="Create a point of interest",
)
async def create_point_of_interest(
    city_id: ResourceId,
    point_of_interest: PointOfInterestCreate,
    request: Request,
    repository: CityInfoRepositoryDep,
    media_type: AcceptedMediaType,
) -> Response:
    """Create a point of interest and answer with its location."""
    if not await repository.city_exists(city_id):
        return _not_found()

    entity = to_point_of_interest_entity(point_of_interest)
    await repository.add_point_of_interest(city_id, entity)
    await repository.save_changes()

    location = request.url_for(
        "get_point_of_interest", city_id=city_id, point_of_interest_id=entity.id
    )
    logger.info("Created point of interest {} in city {}", entity.id, city_id)

    return negotiated_response(
        media_type,
        to_point_of_interest(entity),
        root_tag="pointOfInterest",
        status_code=status.HTTP_201_CREATED,
        headers={"Location": str(location)},
    )


@router.put(
    "/{point_of_interest_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=NOT_FOUND_RESPONSES,
    summary="Replace a point of interest",
)
async def update_point_of_interest(
    city_id: ResourceId,
    point_of_interest_id: ResourceId,
    point_of_interest: PointOfInterestUpdate,
    repository: CityInfoRepositoryDep,
) -> Response:
    """Overwrite every mutable field. Omitted optional fields are reset."""
    if not await repository.city_exists(city_id):
        return _not_found()

    entity = await repository.get_point_of_interest(city_id, point_of_interest_id)
    if entity is None:
        return _not_found()

    apply_point_of_interest_update(point_of_interest, entity)
    await repository.save_changes()

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/{point_of_interest_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=NOT_FOUND_RESPONSES,
    summary="Partially update a point of interest with JSON Patch",
)
async def partially_update_point_of_interest(
    city_id: ResourceId,
    point_of_interest_id: ResourceId,
    patch_document: Annotated[
        list[dict[str, Any]],
        Body(
            examples=[[{"op": "replace", "path": "/name", "value": "Updated name"}]]
        ),
    ],
    repository: CityInfoRepositoryDep,
) -> Response:
    """Apply an RFC 6902 patch to the point of interest.

    The patch must apply cleanly to the update representation, and the
    patched representation must pass the same validation as a full update.
    Nothing is stored unless both checks pass.
    """
    if not await repository.city_exists(city_id):
        return _not_found()

    entity = await repository.get_point_of_interest(city_id, point_of_interest_id)
    if entity is None:
        return _not_found()

    try:
        patched = apply_patch(to_point_of_interest_update(entity), patch_document)
    except PatchDocumentError as e:
        logger.warning("Rejected patch document", patch_errors=e.errors)
        return create_error_response(
            status.HTTP_400_BAD_REQUEST,
            ErrorCode.VALIDATION_ERROR,
            "Invalid patch document",
            severity=Severity.LOW,
            details={"validation_errors": e.errors},
        )

    try:
        point_of_interest = PointOfInterestUpdate.model_validate(patched)
    except ValidationError as e:
        details = validation_error_details(list(e.errors()))
        logger.warning("Patched point of interest failed validation", **details)
        return create_error_response(
            status.HTTP_400_BAD_REQUEST,
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            severity=Severity.LOW,
            details=details,
        )

    apply_point_of_interest_update(point_of_interest, entity)
    await repository.save_changes()

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{point_of_interest_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=NOT_FOUND_RESPONSES,
    summary="Delete a point of interest",
)
async def delete_point_of_interest(
    city_id: ResourceId,
    point_of_interest_id: ResourceId,
    repository: CityInfoRepositoryDep,
    mail_service: Annotated[MailService, Depends(get_mail_service)],
) -> Response:
    """Delete the point of interest and notify by mail.

    A failing notification is logged and does not stop the deletion.
    """
    if not await repository.city_exists(city_id):
        return _not_found()

    entity = await repository.get_point_of_interest(city_id, point_of_interest_id)
    if entity is None:
        return _not_found()

    await repository.delete_point_of_interest(entity)

    try:
        mail_service.send(
            "Point of interest deleted.",
            f"Point of interest {entity.name} with id {entity.id} was deleted.",
        )
    except Exception:
        logger.exception(
            "Failed to send deletion notification for point of interest {}",
            entity.id,
        )

    await repository.save_changes()

    return Response(status_code=status.HTTP_204_NO_CONTENT)
