"""
HTTP error mapping

Every error leaves the API as `{"detail": ...}`. Domain errors carry their own status
code; malformed requests are 400; anything unexpected is logged with its traceback
and hidden behind a generic 500.
"""

from typing import Any, Callable, Coroutine

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger


ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]


def _detail(status_code: int, detail: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'detail': jsonable_encoder(detail)})


def _where(request: Request) -> str:
    return f'{request.method} {request.url.path}'


async def domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, CustomBaseError) else CustomBaseError(str(exc))
    if error.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        Logger.base.error(f'💥 [HTTP] {type(error).__name__} on {_where(request)}: {error.message}')
    else:
        Logger.base.info(
            f'↩️ [HTTP] {error.status_code} {type(error).__name__} on {_where(request)}: '
            f'{error.message}'
        )
    return _detail(error.status_code, error.message)


async def request_validation_handler(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    # Pydantic error contexts may hold exception objects; keep only what JSON can carry
    detail = [
        {'loc': list(error.get('loc', ())), 'msg': error.get('msg', ''), 'type': error.get('type')}
        for error in errors
    ]
    Logger.base.info(f'↩️ [HTTP] 400 malformed request on {_where(request)}: {detail}')
    return _detail(status.HTTP_400_BAD_REQUEST, detail)


async def value_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return _detail(status.HTTP_400_BAD_REQUEST, str(exc))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    Logger.base.exception(f'💥 [HTTP] Unhandled error on {_where(request)}: {exc}')
    return _detail(status.HTTP_500_INTERNAL_SERVER_ERROR, 'Internal server error')


EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    CustomBaseError: domain_error_handler,
    RequestValidationError: request_validation_handler,
    ValueError: value_error_handler,
    Exception: unhandled_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
