"""Response classes for the two representations the API produces.

- ``ORJSONResponse``: JSON through orjson, the default response class
- ``XMLResponse``: XML built with ElementTree, used when a client asks for
  ``application/xml`` or ``text/xml``

XML documents mirror the JSON structure: object keys become child elements
and list entries become repeated item elements under their parent.
"""

import xml.etree.ElementTree as ET
from typing import Any

import orjson
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from cityinfo.api.constants import XML_MEDIA_TYPE

# Element name used for each entry of a list, keyed by the list's element name
XML_ITEM_TAGS = {
    "cities": "city",
    "pointsOfInterest": "pointOfInterest",
}
DEFAULT_XML_ITEM_TAG = "item"


class ORJSONResponse(JSONResponse):
    """FastAPI Response class using orjson for JSON serialization."""

    media_type = "application/json"

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - accepts any JSON-serializable content
        """Render the content as JSON using orjson.

        Args:
            content: The content to serialize to JSON.

        Returns:
            bytes: The JSON-encoded bytes.
        """
        if isinstance(content, BaseModel):
            content = content.model_dump(mode="json", by_alias=True)

        return orjson.dumps(content)


def _xml_text(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _append_xml(parent: ET.Element, tag: str, value: object) -> None:
    element = ET.SubElement(parent, tag)
    _fill_xml(element, tag, value)


def _fill_xml(element: ET.Element, tag: str, value: object) -> None:
    if isinstance(value, dict):
        for key, child in value.items():
            _append_xml(element, str(key), child)
    elif isinstance(value, list | tuple):
        item_tag = XML_ITEM_TAGS.get(tag, DEFAULT_XML_ITEM_TAG)
        for child in value:
            _append_xml(element, item_tag, child)
    elif value is not None:
        element.text = _xml_text(value)


def to_xml(content: Any, root_tag: str) -> bytes:  # noqa: ANN401 - any JSON-compatible content
    """Serialize JSON-compatible content to an XML document.

    Args:
        content: Dicts, lists and scalars as produced by ``model_dump``.
        root_tag: Name of the document element.

    Returns:
        bytes: UTF-8 encoded XML document with declaration.
    """
    root = ET.Element(root_tag)
    _fill_xml(root, root_tag, content)
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


class XMLResponse(Response):
    """Response rendering JSON-compatible content as XML.

    Args:
        content: Dicts, lists and scalars as produced by ``model_dump``.
        root_tag: Name of the document element.
    """

    media_type = XML_MEDIA_TYPE

    def __init__(
        self,
        content: Any,  # noqa: ANN401 - any JSON-compatible content
        *,
        root_tag: str,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.root_tag = root_tag
        super().__init__(content, status_code=status_code, headers=headers)

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - any JSON-compatible content
        """Render the content as an XML document."""
        return to_xml(content, self.root_tag)
