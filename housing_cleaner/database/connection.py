"""Database connection and session management."""

from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from housing_cleaner.core.config import settings
from housing_cleaner.monitoring.logger import get_logger

from .models import Base

logger = get_logger(__name__)

# Global engine and session factory
_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def create_db_engine(database_url: str) -> Engine:
    """Create an engine for a database URL.

    Args:
        database_url: SQLAlchemy URL

    Returns:
        SQLAlchemy Engine instance
    """
    echo = settings.debug and settings.log_level == "DEBUG"

    if database_url.startswith("sqlite"):
        # Ensure data directory exists for file-backed SQLite
        db_path = database_url.replace("sqlite:///", "")
        if db_path and db_path != database_url and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=echo,
        )

        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    else:
        engine = create_engine(
            database_url,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
            echo=echo,
        )

    logger.info(f"Database engine created | url={database_url.split('@')[-1]}")
    return engine


def get_engine() -> Engine:
    """Get or create the engine for the configured database.

    Returns:
        SQLAlchemy Engine instance
    """
    global _engine

    if _engine is None:
        _engine = create_db_engine(settings.database_url)

    return _engine


def get_session_factory(engine: Engine | None = None) -> sessionmaker:
    """Get a session factory.

    Args:
        engine: Engine to bind; the configured engine's cached factory when omitted

    Returns:
        SQLAlchemy sessionmaker instance
    """
    global _SessionLocal

    if engine is not None:
        return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)

    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            bind=get_engine(),
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    return _SessionLocal


@contextmanager
def get_db_context(factory: sessionmaker | None = None) -> Generator[Session, None, None]:
    """Context manager for database sessions.

    Commits on success, rolls back on error.

    Args:
        factory: Session factory (configured database by default)

    Yields:
        Database session
    """
    SessionLocal = factory or get_session_factory()
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(engine: Engine | None = None) -> None:
    """Initialize database - create all tables."""
    Base.metadata.create_all(bind=engine or get_engine())
    logger.info("Database tables created successfully")


def check_db_connection(engine: Engine | None = None) -> bool:
    """Check if database connection is healthy.

    Returns:
        True if connection is healthy, False otherwise
    """
    try:
        with (engine or get_engine()).connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False
