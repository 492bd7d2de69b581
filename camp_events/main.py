import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request

from camp_events.api import health, routes
from camp_events.core.config import Settings, get_settings
from camp_events.core.errors import register_exception_handlers
from camp_events.db.database import (
    Base, create_db_engine, create_session_factory, initialize_database, validate_database_schema,
    validate_database_url,
)
from camp_events.db.seed import seed_events
from camp_events.services.storage import DatabaseStorage

logger = logging.getLogger(__name__)

LOG_LINE_LIMIT = 80


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=logging.DEBUG if settings.is_development else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def validate_port(port) -> int:
    try:
        value = int(port)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid port number: {port}")
    if value < 1 or value > 65535:
        raise ValueError(f"Invalid port number: {port}")
    return value


def bootstrap(app: FastAPI, sleep=time.sleep):
    """
    Bring the backing store up before serving: wait for the database,
    create missing tables and seed the event catalogue.
    """
    settings = app.state.settings
    logger.info(f"Environment: {settings.APP_ENV}")
    validate_database_url(settings.DATABASE_URL)

    initialize_database(
        app.state.engine,
        retries=settings.DB_CONNECT_RETRIES,
        base_delay=settings.DB_RETRY_BASE_DELAY,
        sleep=sleep,
    )
    Base.metadata.create_all(bind=app.state.engine)
    if settings.APP_ENV == "production":
        validate_database_schema(app.state.engine)

    db = app.state.session_factory()
    try:
        seed_events(DatabaseStorage(db), location=settings.DEFAULT_LOCATION)
    finally:
        db.close()
    logger.info("Database initialized successfully")


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        bootstrap(app)
    except Exception as e:
        logger.critical(f"Critical startup error: {e}")
        raise
    yield
    app.state.engine.dispose()
    logger.info("Server closed gracefully")


def create_app(settings: Settings = None, engine=None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

    app.state.settings = settings
    app.state.engine = engine or create_db_engine(settings)
    app.state.session_factory = create_session_factory(app.state.engine)
    app.state.started_at = time.monotonic()

    register_exception_handlers(app, settings)

    @app.middleware("http")
    async def log_api_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            duration = round((time.perf_counter() - start) * 1000)
            line = f"{request.method} {request.url.path} {response.status_code} in {duration}ms"
            if len(line) > LOG_LINE_LIMIT:
                line = line[:LOG_LINE_LIMIT - 1] + "…"
            logger.info(line)
        return response

    app.include_router(health.router)
    app.include_router(routes.router)
    return app


def main():
    settings = get_settings()
    configure_logging(settings)
    try:
        port = validate_port(settings.PORT)
    except ValueError as e:
        logger.critical(str(e))
        raise SystemExit(1)
    logger.info(f"Starting server on {settings.HOST}:{port}")
    uvicorn.run("camp_events.main:create_app", factory=True, host=settings.HOST, port=port)


if __name__ == "__main__":
    main()
