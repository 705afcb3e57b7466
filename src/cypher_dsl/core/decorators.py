"""Error handling decorators"""

import inspect
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar, cast

from .base import ApplicationError, ErrorLevel
from .error_context import ErrorContextManager
from .logging import get_logger

logger = get_logger(__name__)
P = ParamSpec("P")
T = TypeVar("T")


def _log_failure(func_name: str, error: Exception, level: ErrorLevel, context: dict[str, Any]) -> None:
    logger.log(
        level.to_logging_level(),
        f"Error in {func_name}: {error!s}",
        extra=context,
        exc_info=True,
    )


def with_error_handling(
    error_level: ErrorLevel = ErrorLevel.ERROR,
    reraise: bool = True,
    convert: Callable[[Exception], ApplicationError] | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator for logging errors raised by a function.

    Args:
        error_level: Severity level for errors that are not ApplicationErrors
        reraise: Whether to re-raise the error after logging it
        convert: Optional factory turning foreign exceptions into an
            ApplicationError, which is raised in their place

    Returns:
        Decorated function with error handling
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        original_signature = inspect.signature(func)

        def handle(error: Exception, ctx_error: Exception) -> Exception:
            level = error.level if isinstance(error, ApplicationError) else error_level
            with ErrorContextManager(ctx_error) as ctx:
                _log_failure(
                    func.__name__,
                    error,
                    level,
                    {"function": func.__name__, "error_context": ctx.to_dict()},
                )
            return ctx_error

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
                try:
                    return await cast("Callable[P, Awaitable[T]]", func)(*args, **kwargs)
                except ApplicationError as e:
                    handle(e, e)
                    if reraise:
                        raise
                    return cast("T", None)
                except Exception as e:
                    converted = convert(e) if convert else e
                    handle(e, converted)
                    if reraise:
                        if converted is e:
                            raise
                        raise converted from e
                    return cast("T", None)

            async_wrapper.__signature__ = original_signature  # type: ignore[attr-defined]
            return cast("Callable[P, T]", async_wrapper)

        @wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except ApplicationError as e:
                handle(e, e)
                if reraise:
                    raise
                return cast("T", None)
            except Exception as e:
                converted = convert(e) if convert else e
                handle(e, converted)
                if reraise:
                    if converted is e:
                        raise
                    raise converted from e
                return cast("T", None)

        sync_wrapper.__signature__ = original_signature  # type: ignore[attr-defined]
        return sync_wrapper

    return decorator
