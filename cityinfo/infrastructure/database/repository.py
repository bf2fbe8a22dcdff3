"""Base repository pattern implementation for database operations.

Repositories never commit implicitly. Mutations accumulate in the session
and are written in one transaction by ``save_changes``.
"""

from typing import Generic, TypeVar

from loguru import logger
from sqlalchemy import exists, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import ORMOption

from cityinfo.infrastructure.database.base import BaseModel

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """Generic lookups and unit-of-work persistence for one model class.

    Args:
        session: The async SQLAlchemy session to use for operations.
        model_class: The SQLAlchemy model class this repository manages.

    Example:
        class CityRepository(BaseRepository[City]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, City)
    """

    def __init__(self, session: AsyncSession, model_class: type[T]) -> None:
        self.session = session
        self.model_class = model_class
        logger.debug("Initialized repository for {}", model_class.__name__)

    async def get_by_id(self, entity_id: int, *options: ORMOption) -> T | None:
        """Retrieve a model instance by its ID.

        Args:
            entity_id: The primary key ID of the model to retrieve.
            *options: Loader options applied to the query.

        Returns:
            T | None: The model instance if found, None otherwise.
        """
        logger.debug("Fetching {} by ID: {}", self.model_class.__name__, entity_id)

        stmt = (
            select(self.model_class)
            .where(self.model_class.id == entity_id)
            .options(*options)
        )
        result = await self.session.execute(stmt)
        instance = result.scalar_one_or_none()

        if instance is None:
            logger.debug(
                "{} instance not found with ID: {}",
                self.model_class.__name__,
                entity_id,
            )

        return instance

    async def exists(self, entity_id: int) -> bool:
        """Check if a model instance exists by its ID.

        Args:
            entity_id: The primary key ID to check.

        Returns:
            bool: True if the instance exists, False otherwise.
        """
        stmt = select(exists().where(self.model_class.id == entity_id))
        result = await self.session.execute(stmt)
        exists_value = bool(result.scalar())

        logger.debug(
            "Existence check result for {} with ID {}: {}",
            self.model_class.__name__,
            entity_id,
            exists_value,
        )

        return exists_value

    async def filter_by(self, **kwargs: object) -> list[T]:
        """Filter model instances by equality on the given columns.

        Args:
            **kwargs: Column-value pairs to filter by.

        Returns:
            list[T]: Matching instances ordered by ID.
        """
        stmt = (
            select(self.model_class)
            .filter_by(**kwargs)
            .order_by(self.model_class.id)
        )
        result = await self.session.execute(stmt)
        instances = list(result.scalars().all())

        logger.debug(
            "Filtered {} - found {} instances with filters: {}",
            self.model_class.__name__,
            len(instances),
            kwargs,
        )

        return instances

    async def find_one_by(self, **kwargs: object) -> T | None:
        """Find the single instance matching every given column value.

        Args:
            **kwargs: Column-value pairs to filter by.

        Returns:
            T | None: The matching instance if found, None otherwise.
        """
        stmt = select(self.model_class).filter_by(**kwargs).limit(1)
        result = await self.session.execute(stmt)
        instance = result.scalar_one_or_none()

        if instance is None:
            logger.debug(
                "{} instance not found with filters: {}",
                self.model_class.__name__,
                kwargs,
            )

        return instance

    def add(self, obj: T) -> None:
        """Stage a new instance for insertion. Takes effect on ``save_changes``."""
        self.session.add(obj)
        logger.debug("Staged {!r} for insertion", obj)

    async def delete(self, obj: BaseModel) -> None:
        """Mark an instance for deletion. Takes effect on ``save_changes``."""
        await self.session.delete(obj)
        logger.debug("Marked {!r} for deletion", obj)

    async def save_changes(self) -> bool:
        """Commit every pending change of the session as one transaction.

        Any number of affected rows, including zero, counts as success.

        Returns:
            bool: Always True once the commit went through.

        Raises:
            SQLAlchemyError: If the commit fails. The session is rolled back
                before the error propagates.
        """
        pending = (
            len(self.session.new) + len(self.session.dirty) + len(self.session.deleted)
        )
        try:
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            logger.error("Failed to save changes, session rolled back")
            raise

        logger.info("Saved changes - {} pending objects written", pending)
        return True
