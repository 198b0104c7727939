import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


async def with_timeout(
    awaitable: Awaitable,
    timeout_seconds: Optional[float],
    on_timeout: Optional[Callable[[], Awaitable[None]]] = None,
):
    """Run an awaitable with an optional timeout and timeout handler.

    A ``timeout_seconds`` of ``None`` waits indefinitely.
    """
    if timeout_seconds is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError:
        if on_timeout is not None:
            try:
                await on_timeout()
            except Exception as exc:
                logger.warning("Timeout handler failed: %s", exc)
        raise
