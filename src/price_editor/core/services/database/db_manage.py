"""Schema management for the tables this service owns."""

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from src.price_editor.core.services.database.db_session import DbSessionService


class DbManageService:
    def __init__(self, db_service: DbSessionService | None = None):
        self._db_service = db_service or DbSessionService()

    @property
    def engine(self) -> Engine:
        return self._db_service.engine

    def create_all(self) -> None:
        """Create all database tables."""
        from src.price_editor.entities.settings import EditorSettingsTable  # noqa: F401

        SQLModel.metadata.create_all(self.engine)
        logger.info("Database initialized with tables.")

    def drop_all(self) -> None:
        from src.price_editor.entities.settings import EditorSettingsTable  # noqa: F401

        SQLModel.metadata.drop_all(self.engine)
        logger.info("Database tables dropped.")
