# utils/errors.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that end a request with a well-defined status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    headers = None

    def __init__(self, detail: str = "Error"):
        super().__init__(detail)
        self.detail = detail

    def to_detail(self):
        return self.detail


class ValidationFailedError(AppError):
    """Input passed schema validation but breaks a business rule.

    Rendered in the same shape FastAPI uses for request validation errors,
    so clients parse one format for every 422.
    """

    status_code = 422

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_detail(self):
        return [{"loc": ["body", self.field], "msg": self.detail, "type": "value_error"}]


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


class UnauthenticatedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidTokenError(UnauthenticatedError):
    pass


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


# Register JSON handlers for domain errors and unexpected failures
def register_exception_handlers(app: FastAPI):
    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.to_detail()},
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )
