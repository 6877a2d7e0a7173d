"""
HTTP mapping for the error taxonomy

Every CustomBaseError carries its own status code, handlers only shape the response.
"""

from typing import Any, Callable, Coroutine

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from src.platform.exception.exceptions import (
    CascadeIncompleteError,
    ConflictError,
    CustomBaseError,
)
from src.platform.logging.loguru_io import Logger

# Type alias for exception handlers (compatible with Starlette's expected signature)
ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]

RETRY_AFTER_SECONDS = 1


async def custom_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, CustomBaseError) else CustomBaseError(str(exc))
    return JSONResponse(status_code=error.status_code, content={'detail': error.message})


async def conflict_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """A lost lock race is transient: the whole request may be sent again."""
    response = await custom_error_handler(request, exc)
    response.headers['Retry-After'] = str(RETRY_AFTER_SECONDS)
    return response


async def cascade_incomplete_handler(request: Request, exc: Exception) -> JSONResponse:
    Logger.base.error(f'⚠️ [CASCADE] {request.method} {request.url.path} rolled back: {exc}')
    return await custom_error_handler(request, exc)


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, RequestValidationError) else RequestValidationError([])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'detail': jsonable_encoder(error.errors())},
    )


async def general_500_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    Logger.base.exception(f'Unhandled error on {request.method} {request.url.path}: {exc}')
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'detail': 'Internal server error'},
    )


# Starlette picks the most specific class in the exception's MRO
EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    ConflictError: conflict_error_handler,
    CascadeIncompleteError: cascade_incomplete_handler,
    CustomBaseError: custom_error_handler,
    RequestValidationError: validation_error_handler,
    Exception: general_500_exception_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
