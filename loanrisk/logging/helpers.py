"""
Helper decorators for common logging patterns.
"""

import functools
import logging
import time
from typing import Any, Callable, Optional, TypeVar, cast

from loanrisk.logging.config import get_logger

F = TypeVar("F", bound=Callable[..., Any])


def log_performance(
    logger: Optional[logging.Logger] = None,
    threshold_ms: float = 0,  # 0 means log all calls
    log_level: int = logging.DEBUG,
) -> Callable[[F], F]:
    """
    Decorator to log function performance.

    Args:
        logger: Logger to use (if None, get logger based on module name)
        threshold_ms: Only log if execution time exceeds threshold (milliseconds)
        log_level: Log level for performance messages

    Returns:
        Decorated function with performance logging
    """

    def decorator(func: F) -> F:
        log = logger or get_logger(func.__module__)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed_ms = (time.perf_counter() - start_time) * 1000

            if elapsed_ms >= threshold_ms:
                log.log(
                    log_level, f"Performance: {func.__qualname__} took {elapsed_ms:.2f}ms"
                )

            return result

        return cast(F, wrapper)

    return decorator
