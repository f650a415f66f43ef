import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class PresentationTimer:
    """Holds back the reveal of a spin result while the wheel animates.

    Only the awaiting coroutine is suspended; the spin itself is committed
    before present() is called.
    """

    def __init__(self, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self._sleep = sleep

    async def present(self, duration_ms: int) -> None:
        if duration_ms < 0:
            raise ValueError(f"duration_ms must be >= 0, got {duration_ms}")
        if duration_ms == 0:
            return
        logger.debug(f"Holding spin reveal for {duration_ms}ms")
        await self._sleep(duration_ms / 1000)
