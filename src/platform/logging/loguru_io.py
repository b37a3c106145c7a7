"""
`@Logger.io`: argument / return / exception logging for use cases, repositories and
controllers.

Arguments and return values are only rendered in DEBUG, after masking contact and
credential fields. Exceptions are logged once, at the deepest decorated frame they
cross: client errors (4xx domain errors) at WARNING, everything else with traceback.
"""

from functools import wraps
from inspect import iscoroutinefunction
from typing import TYPE_CHECKING, Any, Callable, ParamSpec, TypeVar, cast, overload


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io_config import (
    ExtraField,
    call_depth_var,
    custom_logger,
)
from src.platform.logging.loguru_io_utils import (
    build_call_target_func_path,
    get_chain_start_time,
    mask_sensitive,
    normalize_args_kwargs,
    reset_call_depth,
    should_mask_keyword,
    truncate_content,
)


_F = TypeVar('_F', bound=Callable[..., Any])
_P = ParamSpec('_P')
_T = TypeVar('_T')

_LOGGED_FLAG = '_has_logged'


class LoguruIO:
    def __init__(self, custom_logger: 'LoguruLogger', *, truncate_content: bool = True) -> None:
        self._custom_logger = custom_logger
        self.truncate_content = truncate_content
        self.extra: dict[str, Any] = {}
        # Points loguru's {file}:{line} at the decorated call site, not this module
        self.depth = 2

    def _bound(self) -> 'LoguruLogger':
        return self._custom_logger.bind(**self.extra).opt(depth=self.depth)

    def _render(self, data: Any) -> Any:
        if isinstance(data, dict):
            rendered: Any = {
                key: self._render(should_mask_keyword(key, value)) for key, value in data.items()
            }
        elif isinstance(data, list | tuple):
            rendered = type(data)(self._render(item) for item in data)
        else:
            rendered = mask_sensitive(data)
        return truncate_content(rendered) if self.truncate_content else rendered

    def enter(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        call_depth_var.set(call_depth_var.get() + 1)
        self.extra[ExtraField.CHAIN_START_TIME] = get_chain_start_time()
        if settings.DEBUG:
            self._bound().debug(f'args: {self._render(args)}, kwargs: {self._render(kwargs)}')

    def leave(self, return_value: Any) -> None:
        if settings.DEBUG:
            self._bound().debug(f'return: {self._render(return_value)}')

    def fail(self, e: Exception) -> None:
        if getattr(e, _LOGGED_FLAG, False):
            return
        setattr(e, _LOGGED_FLAG, True)
        if isinstance(e, CustomBaseError) and e.status_code < 500:
            self._bound().warning(f'{type(e).__name__}({e.status_code}): {e}')
        else:
            self._bound().exception(f'{type(e).__name__}: {e}')

    def __call__(self, func: _F) -> _F:
        self.extra[ExtraField.CALL_TARGET] = build_call_target_func_path(func)

        if iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                self.enter(args, kwargs)
                try:
                    args, kwargs = normalize_args_kwargs(func, *args, **kwargs)
                    return_value = await func(*args, **kwargs)
                except Exception as e:
                    self.fail(e)
                    raise
                finally:
                    reset_call_depth()
                self.leave(return_value)
                return return_value

            return cast(_F, async_wrapper)

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            self.enter(args, kwargs)
            try:
                args, kwargs = normalize_args_kwargs(func, *args, **kwargs)
                return_value = func(*args, **kwargs)
            except Exception as e:
                self.fail(e)
                raise
            finally:
                reset_call_depth()
            self.leave(return_value)
            return return_value

        return cast(_F, sync_wrapper)


class Logger:
    base = custom_logger

    @overload
    @staticmethod
    def io(func: Callable[_P, _T]) -> Callable[_P, _T]: ...

    @overload
    @staticmethod
    def io(func: None = ..., *, truncate_content: bool = ...) -> LoguruIO: ...

    @staticmethod
    def io(
        func: Callable[_P, _T] | None = None, *, truncate_content: bool = True
    ) -> Callable[_P, _T] | LoguruIO:
        decorator = LoguruIO(custom_logger=custom_logger, truncate_content=truncate_content)
        return decorator(func) if func else decorator
