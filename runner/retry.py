# runner/retry.py
import asyncio
import functools
import random
from typing import Type, Callable, Any, Tuple
from .logger import log

def async_retry(
    retries: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    jitter: bool = True,
    max_delay: float = 8.0,
):
    """
    Decorator for async functions to retry on failure with exponential backoff.

    Args:
        retries: Max number of retries (default 3)
        delay: Initial delay in seconds (default 1.0)
        backoff: Multiplier for delay after each failure (default 2.0)
        exceptions: Tuple of exceptions to catch and retry on (default (Exception,))
        jitter: Add random jitter to delay (default True)
        max_delay: Upper bound for a single wait (default 8.0)
    """
    def decorator(func: Callable):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            current_delay = delay

            for attempt in range(retries + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt == retries:
                        log("ERROR", "retry_failed", f"Function {func.__name__} failed after {retries} retries", error=str(e))
                        raise

                    wait_time = min(current_delay, max_delay)
                    if jitter:
                        wait_time *= (0.5 + random.random())

                    log("DEBUG", "retry_attempt", f"Retrying {func.__name__} in {wait_time:.2f}s (Attempt {attempt + 1}/{retries})", error=str(e))

                    await asyncio.sleep(wait_time)
                    current_delay *= backoff
        return wrapper
    return decorator
