from datetime import UTC, datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


class EntityTable(SQLModel, table=False):
    """Base table with a string key and audit timestamps."""

    id: str = Field(primary_key=True, description="Unique identifier for the row")

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "onupdate": sa.func.now(),
        },
    )
