import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class TimeLogsError(Exception):
    """Base class for errors raised by the service layer"""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Request could not be processed"

    def __init__(self, detail: Optional[str] = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class NotFoundError(TimeLogsError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class PermissionDeniedError(TimeLogsError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Not enough permissions"


class InvalidStateError(TimeLogsError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid state"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(TimeLogsError)
    async def time_logs_error_handler(request: Request, exc: TimeLogsError):
        logger.info("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.detail)
        return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse({"detail": "Internal server error"}, status_code=500)
