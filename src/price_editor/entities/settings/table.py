"""Editor settings database table model."""

from sqlalchemy import JSON, Column
from sqlmodel import Field

from src.price_editor.entities._base import EntityTable

SETTINGS_ROW_ID = "wpe_editor_settings"


class EditorSettingsTable(EntityTable, table=True):
    """Single-row persistence model for editor settings.

    Values are stored as one JSON document so that keys added in later
    versions merge with defaults on read instead of needing a migration.
    """

    __tablename__ = "editor_settings"

    id: str = Field(default=SETTINGS_ROW_ID, primary_key=True)
    value: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
