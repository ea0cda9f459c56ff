"""Data-access layer for editor settings."""

from datetime import UTC, datetime

from loguru import logger
from sqlmodel import Session

from .entity import EditorSettings, merge_with_defaults
from .table import SETTINGS_ROW_ID, EditorSettingsTable


class EditorSettingsRepository:
    """Reads and writes the single editor settings row."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _row(self) -> EditorSettingsTable | None:
        return self._session.get(EditorSettingsTable, SETTINGS_ROW_ID)

    def get(self) -> EditorSettings:
        """Stored settings merged over defaults, or defaults if none stored."""
        row = self._row()
        return merge_with_defaults(row.value if row else None)

    def exists(self) -> bool:
        return self._row() is not None

    def save(self, settings: EditorSettings) -> EditorSettings:
        row = self._row()
        if row is None:
            row = EditorSettingsTable(id=SETTINGS_ROW_ID, value=settings.model_dump())
        else:
            row.value = settings.model_dump()
            row.updated_at = datetime.now(UTC)
        self._session.add(row)
        self._session.flush()
        return settings

    def activate(self) -> EditorSettings:
        """Seed defaults, or complete stored settings with new default keys."""
        row = self._row()
        settings = merge_with_defaults(row.value if row else None)
        self.save(settings)
        logger.info("Editor settings activated", seeded=row is None)
        return settings

    def delete(self) -> bool:
        row = self._row()
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True
