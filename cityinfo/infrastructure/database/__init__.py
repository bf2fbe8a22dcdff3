"""Relational persistence with SQLAlchemy 2.0 async.

Core components:
- **base**: Declarative base and common model fields
- **models**: ``City`` and ``PointOfInterest``
- **session**: Async engine and session management
- **repository**: Generic lookups and unit-of-work commits
- **city_info_repository**: Queries over cities and points of interest
- **dependencies**: FastAPI dependency injection helpers
"""

from cityinfo.infrastructure.database.base import Base, BaseModel
from cityinfo.infrastructure.database.city_info_repository import CityInfoRepository
from cityinfo.infrastructure.database.dependencies import (
    CityInfoRepositoryDep,
    DatabaseSession,
    get_city_info_repository,
    get_db,
)
from cityinfo.infrastructure.database.models import City, PointOfInterest
from cityinfo.infrastructure.database.repository import BaseRepository
from cityinfo.infrastructure.database.session import (
    check_database_connection,
    close_database,
    create_database_engine,
    get_async_session,
    get_engine,
    get_session_factory,
)

__all__ = [
    "Base",
    "BaseModel",
    "BaseRepository",
    "City",
    "CityInfoRepository",
    "CityInfoRepositoryDep",
    "DatabaseSession",
    "PointOfInterest",
    "check_database_connection",
    "close_database",
    "create_database_engine",
    "get_async_session",
    "get_city_info_repository",
    "get_db",
    "get_engine",
    "get_session_factory",
]
