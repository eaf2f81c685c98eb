from __future__ import annotations

import time
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")


def retry(
    operation: Callable[[], T],
    retries: int,
    delay_sec: float = 1.0,
    on_retry: Callable[[int, Exception], None] | None = None,
) -> T:
    """Run ``operation`` up to ``retries + 1`` times with a linear back-off.

    ``on_retry`` receives the failed attempt number (1-based) and its error
    before each sleep. The last error is re-raised once attempts run out.
    """
    last_error: Exception | None = None
    for attempt in range(retries + 1):
        try:
            return operation()
        except Exception as exc:
            last_error = exc
            if attempt >= retries:
                break
            if on_retry is not None:
                on_retry(attempt + 1, exc)
            time.sleep(delay_sec * (attempt + 1))

    if last_error is None:
        raise RuntimeError("retry() failed without exception")
    raise last_error
