"""FastAPI dependency injection for database sessions and repositories.

One session is opened per request and closed when the response is done.
Handlers commit explicitly through the repository; anything left
uncommitted is discarded.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from cityinfo.infrastructure.database.city_info_repository import CityInfoRepository
from cityinfo.infrastructure.database.session import get_async_session


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Provide the request's database session.

    Yields:
        AsyncGenerator[AsyncSession]: A session scoped to the current request.

    Example:
        @router.get("/cities/{city_id}")
        async def get_city(city_id: int, db: DatabaseSession):
            return await db.get(City, city_id)
    """
    async with get_async_session() as session:
        logger.debug("Providing database session for request")
        try:
            yield session
        finally:
            logger.debug("Database session dependency completed")


DatabaseSession = Annotated[AsyncSession, Depends(get_db)]


def get_city_info_repository(session: DatabaseSession) -> CityInfoRepository:
    """Build the city info repository over the request's session."""
    return CityInfoRepository(session)


CityInfoRepositoryDep = Annotated[CityInfoRepository, Depends(get_city_info_repository)]
