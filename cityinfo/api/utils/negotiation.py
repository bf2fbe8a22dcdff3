"""Content negotiation between the JSON and XML representations.

The ``Accept`` header is parsed with its quality values. JSON is chosen for
``application/json``, ``text/json``, wildcards and requests without an
``Accept`` header; XML for ``application/xml`` and ``text/xml``. When nothing
acceptable is listed the request is refused with 406, unless strict
negotiation is switched off, in which case JSON is served anyway.
"""

from typing import Annotated, Any

from fastapi import Depends, Request, Response
from pydantic import BaseModel

from cityinfo.api.constants import (
    JSON_MEDIA_TYPE,
    JSON_MEDIA_TYPES,
    WILDCARD_MEDIA_TYPES,
    XML_MEDIA_TYPE,
    XML_MEDIA_TYPES,
)
from cityinfo.api.utils.responses import ORJSONResponse, XMLResponse
from cityinfo.core.config import get_settings
from cityinfo.core.exceptions import NotAcceptableError


def parse_accept_header(accept: str) -> list[str]:
    """Return the media ranges of an Accept header, most preferred first.

    Ranges with ``q=0`` are dropped; malformed quality values count as 1.
    """
    ranges: list[tuple[float, int, str]] = []
    for position, part in enumerate(accept.split(",")):
        media_range, *params = (piece.strip() for piece in part.split(";"))
        if not media_range:
            continue
        quality = 1.0
        for param in params:
            key, _, value = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 1.0
        if quality > 0:
            ranges.append((-quality, position, media_range.lower()))
    return [media_range for *_, media_range in sorted(ranges)]


def select_media_type(accept: str | None, *, strict: bool) -> str:
    """Pick the representation for an Accept header.

    Args:
        accept: Raw Accept header value, if any.
        strict: Refuse requests that accept neither JSON nor XML.

    Returns:
        str: ``application/json`` or ``application/xml``.

    Raises:
        NotAcceptableError: If strict and no supported type is acceptable.
    """
    if not accept or not accept.strip():
        return JSON_MEDIA_TYPE

    for media_range in parse_accept_header(accept):
        if media_range in JSON_MEDIA_TYPES or media_range in WILDCARD_MEDIA_TYPES:
            return JSON_MEDIA_TYPE
        if media_range in XML_MEDIA_TYPES:
            return XML_MEDIA_TYPE

    if strict:
        raise NotAcceptableError(
            "None of the requested media types is supported",
            context={"accept": accept, "supported": [JSON_MEDIA_TYPE, XML_MEDIA_TYPE]},
        )
    return JSON_MEDIA_TYPE


def negotiate_media_type(request: Request) -> str:
    """Dependency resolving the response media type of the current request."""
    return select_media_type(
        request.headers.get("accept"),
        strict=get_settings().strict_content_negotiation,
    )


AcceptedMediaType = Annotated[str, Depends(negotiate_media_type)]


def negotiated_response(
    media_type: str,
    content: BaseModel | list[BaseModel],
    *,
    root_tag: str,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> Response:
    """Render transfer objects in the negotiated representation.

    Args:
        media_type: Result of ``negotiate_media_type``.
        content: A transfer object or a list of them.
        root_tag: XML document element name.
        status_code: HTTP status code.
        headers: Extra response headers.

    Returns:
        Response: A JSON or XML response.
    """
    body: Any
    if isinstance(content, list):
        body = [item.model_dump(mode="json", by_alias=True) for item in content]
    else:
        body = content.model_dump(mode="json", by_alias=True)

    if media_type == XML_MEDIA_TYPE:
        return XMLResponse(
            body, root_tag=root_tag, status_code=status_code, headers=headers
        )
    return ORJSONResponse(body, status_code=status_code, headers=headers)
