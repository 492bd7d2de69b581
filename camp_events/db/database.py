import logging
import random
import time
from urllib.parse import urlparse

from fastapi import Request
from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from camp_events.core.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()

REQUIRED_TABLES = ("events", "users", "sessions")


def create_db_engine(settings: Settings) -> Engine:
    """
    Build the pooled engine for the configured database.

    SQLite URLs (used by the test suite and local runs) share a single
    connection and get foreign keys switched on so cascades behave like
    Postgres.
    """
    url = settings.DATABASE_URL
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
        connect_args={"connect_timeout": settings.DB_POOL_TIMEOUT},
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def check_database_connection(engine: Engine) -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection failed: {e}")
        return False


def validate_database_url(url: str):
    if not url:
        raise ValueError("DATABASE_URL environment variable is not set")
    parsed = urlparse(url)
    if not parsed.scheme or (not parsed.scheme.startswith("sqlite") and not parsed.hostname):
        raise ValueError("DATABASE_URL environment variable has invalid format")


def initialize_database(engine: Engine, retries: int = 5, base_delay: float = 2.0, sleep=time.sleep):
    """
    Wait for the database to answer, backing off exponentially with jitter.

    Raises RuntimeError once every attempt has failed.
    """
    logger.info("Attempting database connection...")
    for attempt in range(1, retries + 1):
        logger.info(f"Connection attempt {attempt}/{retries}")
        if check_database_connection(engine):
            logger.info("Database connection established successfully")
            return

        logger.error(f"Database connection attempt {attempt}/{retries} failed")
        if attempt == retries:
            raise RuntimeError(f"Failed to connect to database after {retries} attempts")

        delay = base_delay * 2 ** (attempt - 1) + random.random()
        logger.info(f"Waiting {delay:.1f}s before retry...")
        sleep(delay)


def validate_database_schema(engine: Engine) -> list:
    """Return the required tables that are missing. Never raises."""
    try:
        existing = set(inspect(engine).get_table_names())
    except SQLAlchemyError as e:
        logger.warning(f"Schema validation failed (non-critical): {e}")
        return []
    missing = [name for name in REQUIRED_TABLES if name not in existing]
    if missing:
        logger.warning(f"Missing database tables: {', '.join(missing)}")
    else:
        logger.info("Database schema validation passed")
    return missing
