"""Database engine and session factory for the editor settings store."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import text
from sqlmodel import Session, create_engine

from src.price_editor.runtime.context import get_config


class DbSessionService:
    def __init__(self, url: str | None = None):
        """Create the shared engine from configuration, or from an explicit URL."""

        main_config = get_config()
        db_config = main_config.database
        connection_string = url or db_config.connection_string
        self._is_sqlite = connection_string.startswith("sqlite")

        engine_kwargs = {
            "pool_pre_ping": True,
            "echo": False,
            "connect_args": self._get_connect_args(main_config.app.environment),
        }
        if not self._is_sqlite:
            engine_kwargs.update(
                {
                    "pool_size": db_config.pool_size,
                    "max_overflow": db_config.max_overflow,
                    "pool_timeout": db_config.pool_timeout,
                    "pool_recycle": db_config.pool_recycle,
                }
            )

        logger.info(
            "Initializing database engine for environment {}",
            main_config.app.environment,
        )
        self._engine = create_engine(connection_string, **engine_kwargs)

    @property
    def engine(self):
        return self._engine

    def _get_connect_args(self, environment: str) -> dict:
        if not self._is_sqlite:
            return {"connect_timeout": 30}

        if environment == "production":
            logger.warning(
                "SQLite is not recommended for production use. "
                "Consider PostgreSQL for better reliability."
            )
        return {"check_same_thread": False, "timeout": 20}

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(self._engine, expire_on_commit=False)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Commit on success, roll back and re-raise on failure."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.bind(error_type=type(e).__name__).error(
                "Database transaction failed"
            )
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.bind(error_type=type(e).__name__, error_message=str(e)).error(
                "Database health check failed"
            )
            return False

    def dispose(self) -> None:
        self._engine.dispose()
