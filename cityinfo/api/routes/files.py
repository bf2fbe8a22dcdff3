"""File download endpoint."""

import mimetypes
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import FileResponse
from loguru import logger

from cityinfo.api.constants import DEFAULT_FILE_MEDIA_TYPE
from cityinfo.core.config import Settings, get_settings

router = APIRouter(prefix="/files", tags=["files"])


@router.get(
    "",
    response_class=FileResponse,
    responses={status.HTTP_404_NOT_FOUND: {"description": "File not found"}},
    summary="Download the city guide",
)
async def get_file(
    file_name: Annotated[str, Query(alias="fileName")],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Response:
    """Stream the configured download file.

    Every file name resolves to the same file. The content type is derived
    from its extension.
    """
    path = Path(settings.file_config.download_path)
    if not path.is_file():
        logger.info("Requested file {} is not available at {}", file_name, path)
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    media_type, _ = mimetypes.guess_type(path.name)
    return FileResponse(
        path,
        media_type=media_type or DEFAULT_FILE_MEDIA_TYPE,
        filename=path.name,
    )
