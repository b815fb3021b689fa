"""
Uniform error responses.

Every failure leaves the API as ``{"message": "..."}`` with a status code:
explicit ``ApiError``s keep their status, provider HTTP errors forward theirs,
and anything else becomes a 500 carrying the exception message.
"""

from __future__ import annotations

import functools
from typing import Any, Awaitable, Callable, TypeVar

import structlog
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from stockinfo.providers.alpha_vantage import ProviderError

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


class ApiError(HTTPException):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(status_code=status_code, detail={"message": message})
        self.message = message


def custom_api_error(message: str, status_code: int) -> ApiError:
    return ApiError(status_code, message)


def generic_api_error(exc: Exception) -> ApiError:
    if isinstance(exc, ApiError):
        return exc
    if isinstance(exc, ProviderError):
        return ApiError(exc.status_code, exc.message)
    if isinstance(exc, StarletteHTTPException):
        return ApiError(exc.status_code, _detail_message(exc.detail))
    return ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or type(exc).__name__)


def _detail_message(detail: Any) -> str:
    if isinstance(detail, dict) and "message" in detail:
        return str(detail["message"])
    return str(detail)


def _log_error(error: ApiError, handler: str, cause: Exception | None = None) -> None:
    if error.status_code >= 500:
        logger.error(
            "api_error",
            handler=handler,
            status_code=error.status_code,
            message=error.message,
            exc_info=cause,
        )
    else:
        logger.warning(
            "api_error",
            handler=handler,
            status_code=error.status_code,
            message=error.message,
        )


def handle_api_errors(func: F) -> F:
    """Normalize every exception raised by an async route handler."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except ApiError as exc:
            _log_error(exc, func.__name__)
            raise
        except Exception as exc:
            error = generic_api_error(exc)
            _log_error(error, func.__name__, exc)
            raise error from exc

    return wrapper  # type: ignore[return-value]


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.message if isinstance(exc, ApiError) else _detail_message(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = generic_api_error(exc)
    _log_error(error, request.url.path, exc)
    return JSONResponse(status_code=error.status_code, content={"message": error.message})
