"""Database initialization: create tables and seed editor settings."""

from src.price_editor.core.services.database import DbManageService, DbSessionService
from src.price_editor.entities.settings import EditorSettings, EditorSettingsRepository


def init_db(db_service: DbSessionService | None = None) -> EditorSettings:
    """Create all tables, then seed or complete the stored editor settings."""
    db_service = db_service or DbSessionService()
    DbManageService(db_service).create_all()

    with db_service.session_scope() as session:
        return EditorSettingsRepository(session).activate()


if __name__ == "__main__":
    init_db()
