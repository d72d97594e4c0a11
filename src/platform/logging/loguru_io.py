"""
Logger.io - call logging for use cases, repositories and controllers

    @Logger.io
    async def create(self, ...): ...

DEBUG builds log the (masked, truncated) arguments and the return value of each
call together with its duration. A failure is logged once, at the innermost
decorated frame it passes: CustomBaseError at ERROR without a traceback, anything
else with one.
"""

from functools import wraps
from inspect import iscoroutinefunction
from time import perf_counter
import types
from typing import TYPE_CHECKING, Any, Callable, ParamSpec, TypeVar, cast, overload


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io_config import ExtraField, custom_logger
from src.platform.logging.loguru_io_utils import (
    build_call_target_func_path,
    mask_sensitive,
    normalize_args_kwargs,
    should_mask_keyword,
    truncate_content,
)


_F = TypeVar('_F', bound=Callable[..., Any])


class LoguruIO:
    def __init__(
        self, custom_logger: 'LoguruLogger', *, reraise: bool = True, truncate_content: bool = True
    ) -> None:
        self._custom_logger = custom_logger
        self.reraise = reraise
        self.truncate_content = truncate_content
        self._bound: 'LoguruLogger' = custom_logger

    def _on_call(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> float:
        if settings.DEBUG:
            self._bound.opt(depth=2).debug(
                f'args: {self.scrub(args)}, kwargs: {self.scrub(kwargs)}'
            )
        return perf_counter()

    def _on_return(self, return_value: Any, started: float) -> None:
        if settings.DEBUG:
            elapsed_ms = (perf_counter() - started) * 1000
            self._bound.opt(depth=2).debug(
                f'return ({elapsed_ms:.1f} ms): {self.scrub(return_value)}'
            )

    def _on_error(self, e: Exception) -> None:
        if getattr(e, '_has_logged', False):
            return
        e._has_logged = True  # type: ignore[attr-defined]
        bound = self._bound.opt(depth=3)
        if isinstance(e, CustomBaseError):
            bound.error(f'{type(e).__name__}({e.status_code}): {e.message}')
        else:
            bound.exception(f'{type(e).__name__}: {e}')

    def scrub(self, data: Any) -> Any:
        if isinstance(data, dict):
            cleaned: Any = {
                key: self.scrub(should_mask_keyword(key, value)) for key, value in data.items()
            }
        elif isinstance(data, list | tuple):
            cleaned = type(data)(self.scrub(item) for item in data)
        else:
            cleaned = mask_sensitive(data)
        return truncate_content(cleaned) if self.truncate_content else cleaned

    def _hide_from_traceback(self, func: Callable[..., Any]) -> Callable[..., Any]:
        # Report the wrapper under loguru's own file so tracebacks point at user code
        func.__code__ = func.__code__.replace(  # type: ignore[attr-defined]
            co_filename=cast(types.FunctionType, self._custom_logger.catch).__code__.co_filename
        )
        return func

    def __call__(self, func: _F) -> _F:
        self._bound = self._custom_logger.bind(
            **{ExtraField.CALL_TARGET: build_call_target_func_path(func)}
        )

        if iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    started = self._on_call(args, kwargs)
                    args, kwargs = normalize_args_kwargs(func, *args, **kwargs)
                    return_value = await func(*args, **kwargs)
                    self._on_return(return_value, started)
                    return return_value
                except Exception as e:
                    self._on_error(e)
                    if self.reraise:
                        raise
                    return None

            return cast(_F, self._hide_from_traceback(async_wrapper))

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                started = self._on_call(args, kwargs)
                args, kwargs = normalize_args_kwargs(func, *args, **kwargs)
                return_value = func(*args, **kwargs)
                self._on_return(return_value, started)
                return return_value
            except Exception as e:
                self._on_error(e)
                if self.reraise:
                    raise
                return None

        return cast(_F, self._hide_from_traceback(sync_wrapper))


_P = ParamSpec('_P')
_T = TypeVar('_T')


class Logger:
    base = custom_logger

    @overload
    @staticmethod
    def io(func: Callable[_P, _T]) -> Callable[_P, _T]: ...

    @overload
    @staticmethod
    def io(func: None = ..., *, reraise: bool = ..., truncate_content: bool = ...) -> LoguruIO: ...

    @staticmethod
    def io(
        func: Callable[_P, _T] | None = None, *, reraise: bool = True, truncate_content: bool = True
    ) -> Callable[_P, _T] | LoguruIO:
        decorator = LoguruIO(
            custom_logger=custom_logger, reraise=reraise, truncate_content=truncate_content
        )
        return decorator(func) if func else decorator
