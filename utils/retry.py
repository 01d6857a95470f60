"""Retry decorator for handling transient API errors."""

import time
from functools import wraps
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

from .logger import get_logger
import config

logger = get_logger()

# Define a generic type variable for the decorated function's return type
F = TypeVar('F', bound=Callable[..., Any])

def compute_delay(attempt: int, initial_delay: float) -> float:
    """Returns the wait before the attempt following `attempt` (1-based): 1s, 2s, 3s... for a 1s unit."""
    return attempt * initial_delay

def retry_on_exception(
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    sleep: Optional[Callable[[float], Any]] = None,
) -> Callable[[F], F]:
    """Decorator to retry a function call upon specific exceptions with linear backoff.

    Args:
        exceptions: A tuple of exception types to catch and retry on.
        max_attempts: Maximum number of attempts (including the initial one).
        initial_delay: Backoff unit in seconds, see compute_delay.
        sleep: Function used to wait; defaults to time.sleep.

    Returns:
        A decorator function. Once attempts are exhausted the last exception
        is re-raised unchanged; exceptions outside `exceptions` propagate on
        the first occurrence.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            wait = sleep or time.sleep
            attempts = 0
            while True:
                attempts += 1
                try:
                    if config.DEBUG and attempts > 1:
                        logger.debug(f"Retrying {func.__name__} (Attempt {attempts}/{max_attempts})...")
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempts >= max_attempts:
                        logger.error(
                            f"Function {func.__name__} failed after {max_attempts} attempts due to {type(e).__name__}.",
                            exc_info=config.DEBUG
                        )
                        raise  # Re-raise the last exception

                    wait_time = max(0.0, compute_delay(attempts, initial_delay))
                    logger.warning(
                        f"Function {func.__name__} failed with {type(e).__name__} (Attempt {attempts}/{max_attempts}). "
                        f"Retrying in {wait_time:.2f} seconds...",
                        exc_info=config.DEBUG # Log traceback only in debug mode for warnings
                    )
                    wait(wait_time)

        return wrapper # type: ignore
    return decorator
