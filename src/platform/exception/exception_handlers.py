"""
Error responses

Every failure answers `{"message": ..., "error": ...}`:
- CustomBaseError subclasses use their own status code and error code
- request body / query validation problems are InvalidInput (400), not 422
- anything else is a 500 carrying the exception text
"""

from typing import Any, Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger


ExceptionHandler = Callable[[Request, Any], Awaitable[Response]]


def error_response(status_code: int, message: str, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'message': message, 'error': error})


async def custom_error_handler(request: Request, exc: CustomBaseError) -> JSONResponse:
    return error_response(exc.status_code, exc.message, exc.detail)


def describe_validation_error(exc: RequestValidationError) -> str:
    """First problem as `<field>: <reason>`, e.g. `price: Input should be a valid string`."""
    errors = exc.errors()
    if not errors:
        return 'Invalid request body'
    first = errors[0]
    field = '.'.join(str(part) for part in first.get('loc', ()) if part not in ('body', 'query'))
    return f'{field}: {first.get("msg")}' if field else str(first.get('msg', 'Invalid request body'))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = describe_validation_error(exc)
    Logger.base.warning(f'⚠️ [HTTP] {request.method} {request.url.path} rejected: {message}')
    return error_response(status.HTTP_400_BAD_REQUEST, message, 'InvalidInput')


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    Logger.base.exception(f'💥 [HTTP] {request.method} {request.url.path} failed: {exc}')
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, 'Internal server error', str(exc))


EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    CustomBaseError: custom_error_handler,
    RequestValidationError: validation_error_handler,
    Exception: unhandled_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
