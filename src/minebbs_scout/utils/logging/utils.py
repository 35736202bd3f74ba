# ABOUTME: Logger utilities with context binding and operation tracking decorators
# ABOUTME: Provides get_logger function and decorators for consistent structured logging

import functools
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

import structlog

# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., Any])


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance with automatic module detection.

    Args:
        name: Logger name, auto-detected from caller if None

    Returns:
        Configured structlog logger instance
    """
    if name is None:
        import inspect

        frame = inspect.currentframe()
        if frame and frame.f_back:
            name = frame.f_back.f_globals.get("__name__", "unknown")

    return structlog.get_logger(name or "minebbs_scout")


def generate_operation_id() -> str:
    """Generate a unique operation ID for tracking requests."""
    return str(uuid.uuid4())[:8]


def _first_url(args: tuple) -> str | None:
    for arg in args:
        if isinstance(arg, str) and (arg.startswith("http://") or arg.startswith("https://")):
            return arg
    return None


def log_api_call(api_name: str, **context) -> Callable[[F], F]:
    """Decorator to log API calls with request/response details.

    Args:
        api_name: Name of the API being called
        **context: Additional context for the API call

    Returns:
        Decorated function with API call logging
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)
            call_id = generate_operation_id()
            url = _first_url(args) or kwargs.get("url")

            bound_logger = logger.bind(api_name=api_name, call_id=call_id, url=url, **context)

            bound_logger.debug(f"API call to {api_name}")
            start_time = time.time()

            try:
                result = await func(*args, **kwargs)
                duration = time.time() - start_time
                bound_logger.debug(
                    f"API call to {api_name} succeeded", duration_seconds=round(duration, 3), success=True
                )
                return result

            except Exception as e:
                duration = time.time() - start_time
                bound_logger.warning(
                    f"API call to {api_name} failed",
                    duration_seconds=round(duration, 3),
                    error=str(e),
                    error_type=type(e).__name__,
                    success=False,
                )
                raise

        return wrapper  # type: ignore[return-value]

    return decorator


def log_extraction_step(step_name: str) -> Callable[[F], F]:
    """Decorator to log extraction pipeline steps.

    Works for both plain and async functions. Result sizes are reported when the
    result has a length.

    Args:
        step_name: Name of the extraction step

    Returns:
        Decorated function with extraction step logging
    """

    def _result_info(result: Any) -> dict[str, Any]:
        if isinstance(result, (list, tuple, dict)):
            return {"result_count": len(result)}
        return {}

    def decorator(func: F) -> F:
        import inspect

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                bound_logger = get_logger(func.__module__).bind(step=step_name, pipeline="extraction")
                bound_logger.debug(f"Starting extraction step: {step_name}")
                start_time = time.time()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    bound_logger.error(
                        f"Failed extraction step: {step_name}",
                        duration_seconds=round(time.time() - start_time, 3),
                        error=str(e),
                        error_type=type(e).__name__,
                        success=False,
                    )
                    raise
                bound_logger.info(
                    f"Completed extraction step: {step_name}",
                    duration_seconds=round(time.time() - start_time, 3),
                    success=True,
                    **_result_info(result),
                )
                return result

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            bound_logger = get_logger(func.__module__).bind(step=step_name, pipeline="extraction")
            bound_logger.debug(f"Starting extraction step: {step_name}")
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                bound_logger.error(
                    f"Failed extraction step: {step_name}",
                    duration_seconds=round(time.time() - start_time, 3),
                    error=str(e),
                    error_type=type(e).__name__,
                    success=False,
                )
                raise
            bound_logger.info(
                f"Completed extraction step: {step_name}",
                duration_seconds=round(time.time() - start_time, 3),
                success=True,
                **_result_info(result),
            )
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


class LogContext:
    """Context manager for binding logger context."""

    def __init__(self, logger: structlog.stdlib.BoundLogger, **context):
        self.logger = logger
        self.context = context
        self.bound_logger = None

    def __enter__(self) -> structlog.stdlib.BoundLogger:
        self.bound_logger = self.logger.bind(**self.context)
        return self.bound_logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None and self.bound_logger is not None:
            self.bound_logger.error("Context operation failed", error=str(exc_val), error_type=exc_type.__name__)


def with_entity_context(url: str) -> LogContext:
    """Create a logging context for a detail lookup.

    Args:
        url: Source URL of the entity being resolved

    Returns:
        LogContext manager with entity context
    """
    logger = get_logger()
    return LogContext(logger, url=url, operation_id=generate_operation_id())


def with_pipeline_context(pipeline_name: str, **context) -> LogContext:
    """Create a logging context for pipeline operations.

    Args:
        pipeline_name: Name of the pipeline
        **context: Additional context to bind

    Returns:
        LogContext manager with pipeline context
    """
    logger = get_logger()
    operation_id = generate_operation_id()
    return LogContext(logger, pipeline=pipeline_name, operation_id=operation_id, **context)
