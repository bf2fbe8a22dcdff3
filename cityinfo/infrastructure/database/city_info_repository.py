"""Repository for cities and their points of interest.

Query construction (filtering, search, pagination, conditional eager loading)
lives here; route handlers only see entities, ``None`` for missing rows and
``PaginationMetadata`` for listings.
"""

from loguru import logger
from sqlalchemy import ColumnElement, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import noload, selectinload

from cityinfo.core.observability import trace_operation
from cityinfo.core.pagination import PaginationMetadata
from cityinfo.infrastructure.database.models import City, PointOfInterest
from cityinfo.infrastructure.database.repository import BaseRepository


class CityInfoRepository(BaseRepository[City]):
    """Data access for the city / point of interest hierarchy.

    Args:
        session: The request's database session.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, City)
        self._points_of_interest = BaseRepository(session, PointOfInterest)

    async def list_cities(
        self,
        name: str | None,
        search_query: str | None,
        page_number: int,
        page_size: int,
    ) -> tuple[list[City], PaginationMetadata]:
        """Return one page of cities plus the metadata describing it.

        Args:
            name: Exact, case-sensitive name filter. Surrounding whitespace
                is ignored.
            search_query: Substring looked up in name and description.
            page_number: 1-based page to return.
            page_size: Maximum number of cities on the page.

        Returns:
            tuple[list[City], PaginationMetadata]: Cities ordered by name,
                without their points of interest, and the metadata computed
                from the total number of matches.
        """
        conditions: list[ColumnElement[bool]] = []
        if name and name.strip():
            conditions.append(City.name == name.strip())
        if search_query and search_query.strip():
            term = search_query.strip()
            conditions.append(
                or_(
                    City.name.contains(term, autoescape=True),
                    City.description.contains(term, autoescape=True),
                )
            )

        with trace_operation(
            "list_cities", page_number=page_number, page_size=page_size
        ):
            count_stmt = select(func.count()).select_from(City).where(*conditions)
            total_item_count = (await self.session.execute(count_stmt)).scalar_one()

            stmt = (
                select(City)
                .where(*conditions)
                .options(noload(City.points_of_interest))
                .order_by(City.name, City.id)
                .offset(page_size * (page_number - 1))
                .limit(page_size)
            )
            cities = list((await self.session.execute(stmt)).scalars().all())

        logger.debug(
            "Listed {} of {} matching cities",
            len(cities),
            total_item_count,
            name_filter=name,
            search_query=search_query,
        )

        return cities, PaginationMetadata(
            total_item_count=total_item_count,
            page_size=page_size,
            current_page=page_number,
        )

    async def get_city(
        self, city_id: int, include_points_of_interest: bool = False
    ) -> City | None:
        """Fetch a city, optionally with its points of interest.

        Without ``include_points_of_interest`` the collection is left empty
        and never queried.
        """
        loader = (
            selectinload(City.points_of_interest)
            if include_points_of_interest
            else noload(City.points_of_interest)
        )
        return await self.get_by_id(city_id, loader)

    async def city_exists(self, city_id: int) -> bool:
        """Check whether a city exists without loading it."""
        return await self.exists(city_id)

    async def list_points_of_interest(self, city_id: int) -> list[PointOfInterest]:
        """Return the points of interest of a city ordered by ID."""
        return await self._points_of_interest.filter_by(city_id=city_id)

    async def get_point_of_interest(
        self, city_id: int, point_of_interest_id: int
    ) -> PointOfInterest | None:
        """Fetch a point of interest only if it belongs to the given city."""
        return await self._points_of_interest.find_one_by(
            city_id=city_id, id=point_of_interest_id
        )

    async def add_point_of_interest(
        self, city_id: int, point_of_interest: PointOfInterest
    ) -> None:
        """Attach a new point of interest to a city.

        The ID is assigned when the change is saved. The city's existing
        points of interest are not loaded. Nothing happens if the city does
        not exist; callers check ``city_exists`` first.
        """
        if not await self.city_exists(city_id):
            logger.warning(
                "Cannot add point of interest, city {} does not exist", city_id
            )
            return
        point_of_interest.city_id = city_id
        self._points_of_interest.add(point_of_interest)

    async def delete_point_of_interest(
        self, point_of_interest: PointOfInterest
    ) -> None:
        """Mark a point of interest for removal. Takes effect on save."""
        await self._points_of_interest.delete(point_of_interest)
