"""Marker for high-cost operations.

Scans that touch many rows (e.g. every account of an economy) are tagged with
@high_load. They are expected to run infrequently or off-peak; the decorator
logs how long each call took so heavy callers show up in the logs.
"""

import functools
import logging
import time
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

logger = logging.getLogger("eco.high_load")

P = ParamSpec("P")
R = TypeVar("R")


def high_load(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        start = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info("High-load call %s took %.0fms", func.__qualname__, elapsed_ms)

    wrapper.__high_load__ = True  # type: ignore[attr-defined]
    return wrapper
