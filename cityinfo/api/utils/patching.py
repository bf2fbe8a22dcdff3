"""RFC 6902 JSON Patch application onto transfer objects.

The patch is applied to the JSON form of a transfer object. Operations run
in order, one at a time, so a failure can be reported against the path of
the operation that caused it. Only the first failure is reported because
later operations ran against a document that no longer matches the
client's expectations.
"""

from typing import Any

from jsonpatch import JsonPatch, JsonPatchException
from jsonpointer import JsonPointerException
from pydantic import BaseModel

UNKNOWN_MEMBER_MESSAGE = "The target location specified by path '{}' was not found."
NOT_AN_OBJECT_MESSAGE = "The patched document must be an object."


class PatchDocumentError(Exception):
    """Raised when a patch document is malformed or cannot be applied.

    Args:
        errors: Messages keyed by the JSON pointer of the failing operation.
    """

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        super().__init__("Invalid patch document")


def apply_patch(
    document: BaseModel, operations: list[dict[str, Any]]
) -> dict[str, Any]:
    """Apply JSON Patch operations to the JSON form of ``document``.

    The result is not validated against the model; callers do that as a
    separate step.

    Args:
        document: Transfer object the patch targets.
        operations: The patch document, a list of operation objects.

    Returns:
        dict[str, Any]: The patched JSON object.

    Raises:
        PatchDocumentError: If an operation is malformed (unknown ``op``,
            missing members, bad pointer), fails (missing target, failed
            ``test``) or introduces members the model does not have.
    """
    patched: Any = document.model_dump(mode="json", by_alias=True)
    allowed_members = set(patched)

    for operation in operations:
        path = str(operation.get("path", "")) or "/"
        try:
            patched = JsonPatch([operation]).apply(patched)
        except (JsonPatchException, JsonPointerException, TypeError) as e:
            raise PatchDocumentError({path: [str(e)]}) from e

        if not isinstance(patched, dict):
            raise PatchDocumentError({path: [NOT_AN_OBJECT_MESSAGE]})
        if unknown := sorted(set(patched) - allowed_members):
            raise PatchDocumentError(
                {
                    f"/{member}": [UNKNOWN_MEMBER_MESSAGE.format(member)]
                    for member in unknown
                }
            )

    return patched
