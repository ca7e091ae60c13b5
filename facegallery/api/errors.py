"""Translation of service exceptions into ``{"status": "error"}`` responses."""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from facegallery.api.models.common import ErrorResponse
from facegallery.core.exceptions import FaceGalleryError
from facegallery.core.logging import get_logger

logger = get_logger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


async def handle_gallery_error(request: Request, exc: FaceGalleryError) -> JSONResponse:
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "Request failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=exc.message,
        details=exc.details,
    )
    return _error(exc.status_code, exc.message)


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return _error(422, message)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unexpected error while handling request",
        path=request.url.path,
        error=str(exc),
        exc_info=True,
    )
    return _error(500, "An unexpected error occurred while processing the request")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers that give every failure the same body shape."""
    app.add_exception_handler(FaceGalleryError, handle_gallery_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
