import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from feedback_import.exceptions import AppError, ConflictError, NotFoundError, ValidationError

logger = structlog.get_logger()

# Most specific first; anything else derived from AppError is a 500
_STATUS_BY_ERROR: list[tuple[type[AppError], int]] = [
    (NotFoundError, 404),
    (ValidationError, 422),
    (ConflictError, 409),
]


def status_for(exc: AppError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("request_failed", path=request.url.path, code=exc.code, error=exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": exc.message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
