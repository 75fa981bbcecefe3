from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
import traceback

from ..core import logger
from ..core.errors import ApiError, ErrorCode, error_response
from ..core.validation import validation_message, validation_details


class ExceptionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            traceback_str = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            logger.error("Unhandled exception:\n%s", traceback_str)

            return error_response(ErrorCode.INTERNAL_ERROR, "Internal server error", 500)


_STATUS_CODES = {
    400: ErrorCode.BAD_REQUEST,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    429: ErrorCode.RATE_LIMIT_EXCEEDED,
}


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            logger.error("[API Error] %s: %s", exc.code.value, exc.message)
        return error_response(exc.code, exc.message, exc.status_code, exc.details, exc.headers)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        return error_response(
            ErrorCode.VALIDATION_ERROR,
            validation_message(errors),
            400,
            validation_details(errors),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        fallback = ErrorCode.BAD_REQUEST if exc.status_code < 500 else ErrorCode.INTERNAL_ERROR
        code = _STATUS_CODES.get(exc.status_code, fallback)
        return error_response(code, str(exc.detail), exc.status_code, headers=getattr(exc, "headers", None))
