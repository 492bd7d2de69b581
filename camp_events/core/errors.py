import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from camp_events.core.config import Settings

logger = logging.getLogger(__name__)


class CampEventsError(Exception):
    """Base for errors that map onto an HTTP status."""

    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.detail = detail


class NotFound(CampEventsError):
    status_code = 404
    message = "Not found"


class Conflict(CampEventsError):
    status_code = 409
    message = "Already exists"


class ValidationError(CampEventsError):
    status_code = 400
    message = "Invalid request"


class Unauthorized(CampEventsError):
    status_code = 401
    message = "Unauthorized"


class StorageError(CampEventsError):
    status_code = 500
    message = "Storage unavailable"


def register_exception_handlers(app: FastAPI, settings: Settings):
    def render(exc: CampEventsError) -> JSONResponse:
        body = {"message": exc.message}
        if exc.detail and (exc.status_code < 500 or settings.is_development):
            body["detail"] = exc.detail
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(CampEventsError)
    async def handle_camp_events_error(request: Request, exc: CampEventsError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.detail})")
        return render(exc)

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError):
        logger.exception(f"Database error on {request.method} {request.url.path}")
        return render(StorageError("Something went wrong, please try again later", detail=str(exc)))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        fields = [".".join(str(part) for part in err["loc"] if part != "body") for err in exc.errors()]
        return render(ValidationError(f"Invalid or missing fields: {', '.join(fields)}"))
