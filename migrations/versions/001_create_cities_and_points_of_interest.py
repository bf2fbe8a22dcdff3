"""Create cities and points of interest, seeded with three cities.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-16

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_ID = sa.BigInteger().with_variant(sa.Integer(), "sqlite")

SEED_CITIES = [
    {
        "id": 1,
        "name": "New York City",
        "description": "The one with that big park.",
    },
    {
        "id": 2,
        "name": "Antwerp",
        "description": "The one with the cathedral that was never really finished.",
    },
    {
        "id": 3,
        "name": "Paris",
        "description": "The one with that big tower.",
    },
]

SEED_POINTS_OF_INTEREST = [
    {
        "id": 1,
        "city_id": 1,
        "name": "Central Park",
        "description": "The most visited urban park in the United States.",
    },
    {
        "id": 2,
        "city_id": 1,
        "name": "Empire State Building",
        "description": "A 102-story skyscraper located in Midtown Manhattan.",
    },
    {
        "id": 3,
        "city_id": 2,
        "name": "Cathedral of Our Lady",
        "description": "A Gothic style cathedral, conceived by architects "
        "Jan and Pieter Appelmans.",
    },
    {
        "id": 4,
        "city_id": 2,
        "name": "Antwerp Central Station",
        "description": "The finest example of railway architecture in Belgium.",
    },
    {
        "id": 5,
        "city_id": 3,
        "name": "Eiffel Tower",
        "description": "A wrought iron lattice tower on the Champ de Mars, "
        "named after engineer Gustave Eiffel.",
    },
    {
        "id": 6,
        "city_id": 3,
        "name": "The Louvre",
        "description": "The world's largest museum.",
    },
]


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    cities = op.create_table(
        "cities",
        sa.Column("id", _ID, autoincrement=True, nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.String(200), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_cities"),
    )

    points_of_interest = op.create_table(
        "points_of_interest",
        sa.Column("id", _ID, autoincrement=True, nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.String(200), nullable=True),
        sa.Column(
            "city_id",
            _ID,
            sa.ForeignKey(
                "cities.id",
                name="fk_points_of_interest_city_id_cities",
                ondelete="CASCADE",
            ),
            nullable=False,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_points_of_interest"),
    )
    op.create_index(
        "ix_points_of_interest_city_id", "points_of_interest", ["city_id"]
    )

    op.bulk_insert(cities, SEED_CITIES)
    op.bulk_insert(points_of_interest, SEED_POINTS_OF_INTEREST)

    # Explicit ids leave PostgreSQL sequences behind the seeded rows
    if op.get_bind().dialect.name == "postgresql":
        for table in ("cities", "points_of_interest"):
            op.execute(
                f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
                f"(SELECT MAX(id) FROM {table}))"
            )


def downgrade() -> None:
    op.drop_index("ix_points_of_interest_city_id", table_name="points_of_interest")
    op.drop_table("points_of_interest")
    op.drop_table("cities")
