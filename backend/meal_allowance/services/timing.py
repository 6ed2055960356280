"""Duration instrumentation around repository calls."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

# Receives the operation name and its duration in milliseconds.
DurationHook = Callable[[str, float], None]


@asynccontextmanager
async def timed(operation: str, hook: DurationHook | None = None) -> AsyncIterator[None]:
    """Measure the wrapped block and report its duration.

    The duration is reported whether the block succeeds or raises.
    """
    started = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug("%s took %.1f ms", operation, elapsed_ms)
        if hook is not None:
            hook(operation, elapsed_ms)
