"""Pagination metadata returned alongside paged city listings."""

from math import ceil

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class PaginationMetadata(BaseModel):
    """Describes one page of a paged listing.

    Serialized with camelCase keys into the ``X-Pagination`` response header,
    e.g. ``{"totalItemCount":3,"pageSize":10,"currentPage":1,"totalPageCount":1}``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    total_item_count: int = Field(ge=0)
    page_size: int = Field(gt=0)
    current_page: int = Field(gt=0)

    @computed_field(alias="totalPageCount")  # type: ignore[prop-decorator]
    @property
    def total_page_count(self) -> int:
        """Number of pages needed to hold every item."""
        return ceil(self.total_item_count / self.page_size)

    def to_header(self) -> str:
        """Render the metadata as the compact JSON header value."""
        return self.model_dump_json(by_alias=True)
