"""SQLAlchemy declarative base and common model fields.

Every table gets:
- **Integer ID**: server-assigned, immutable primary key
- **Timezone-aware timestamps**: ``created_at`` and ``updated_at``
- **Named constraints**: stable names for Alembic migrations
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, MetaData, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from cityinfo.infrastructure.constants import NAMING_CONVENTION

# SQLite only autoincrements a column declared exactly as INTEGER PRIMARY KEY
PrimaryKeyType = BigInteger().with_variant(Integer(), "sqlite")


class Base(DeclarativeBase):
    """SQLAlchemy declarative base with naming conventions."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class BaseModel(Base):
    """Abstract base model with the fields shared by all tables.

    The ``id`` is assigned by the database when the unit of work is flushed
    and is never changed afterwards.
    """

    __abstract__ = True

    id: Mapped[int] = mapped_column(
        PrimaryKeyType,
        primary_key=True,
        autoincrement=True,
        doc="Server-assigned primary key",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        doc="Timestamp when the record was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        doc="Timestamp when the record was last updated (UTC)",
    )

    def __repr__(self) -> str:
        """Return a string representation of the model instance."""
        return f"<{self.__class__.__name__}(id={self.id})>"
