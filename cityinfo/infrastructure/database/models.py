"""ORM models for cities and their points of interest."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cityinfo.core.constants import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH
from cityinfo.infrastructure.database.base import BaseModel, PrimaryKeyType


class City(BaseModel):
    """A city and the points of interest it owns.

    The points of interest collection is never loaded implicitly: queries
    must ask for it with an eager loading option (or ``noload``) so that the
    async session never issues lazy I/O.
    """

    __tablename__ = "cities"

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    description: Mapped[str | None] = mapped_column(
        String(DESCRIPTION_MAX_LENGTH), nullable=True
    )

    points_of_interest: Mapped[list["PointOfInterest"]] = relationship(
        back_populates="city",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PointOfInterest.id",
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<City(id={self.id}, name={self.name!r})>"


class PointOfInterest(BaseModel):
    """A point of interest belonging to exactly one city."""

    __tablename__ = "points_of_interest"

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    description: Mapped[str | None] = mapped_column(
        String(DESCRIPTION_MAX_LENGTH), nullable=True
    )
    city_id: Mapped[int] = mapped_column(
        PrimaryKeyType,
        ForeignKey("cities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    city: Mapped[City] = relationship(back_populates="points_of_interest", lazy="raise")

    def __repr__(self) -> str:
        return (
            f"<PointOfInterest(id={self.id}, city_id={self.city_id}, "
            f"name={self.name!r})>"
        )
