"""Retry decorator with exponential backoff — stdlib only.

The harvester itself never retries; callers wrap a whole harvest with this
to re-run it from page 1, which rebuilds an equivalent link set.
"""
from __future__ import annotations

import functools
import random
import time
from typing import Any, Callable, Tuple, Type

from autoapply.log import get_logger

log = get_logger(__name__)


def retry(
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
    retryable: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
) -> Callable:
    """Decorator: re-invoke the wrapped callable on ``retryable`` errors."""
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    def _delay_for(attempt: int) -> float:
        delay = min(base_delay * (backoff_factor ** (attempt - 1)), max_delay)
        return delay * (0.5 + random.random()) if jitter else delay

    def decorator(fn: Callable) -> Callable:
        name = getattr(fn, "__qualname__", repr(fn))

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 1
            while True:
                try:
                    return fn(*args, **kwargs)
                except retryable as exc:
                    if attempt >= max_attempts:
                        log.error("%s failed after %d attempt(s): %s", name, attempt, exc)
                        raise
                    delay = _delay_for(attempt)
                    log.warning(
                        "%s attempt %d/%d failed (%s), re-running in %.1fs",
                        name, attempt, max_attempts, exc, delay,
                    )
                    sleep(delay)
                    attempt += 1

        return wrapper

    return decorator
