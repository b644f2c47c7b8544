"""Decorator utilities for cross-cutting concerns."""
import functools
import logging
import time
from typing import Any, Callable, TypeVar, cast

# Setup logging
logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def log_startup_step(step_name: str) -> Callable[[F], F]:
    """Decorator that logs the start, outcome and duration of a startup step.

    Args:
        step_name: Human-readable name used in the log lines

    Returns:
        Decorator function
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger.info(f"Startup step '{step_name}' starting")
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration = time.time() - start_time
                logger.error(f"Startup step '{step_name}' failed after {duration:.2f}s: {str(e)}")
                raise
            duration = time.time() - start_time
            logger.info(f"Startup step '{step_name}' completed in {duration:.2f}s")
            return result
        return cast(F, wrapper)
    return decorator
