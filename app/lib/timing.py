import asyncio
import time
from typing import Awaitable, TypeVar

T = TypeVar("T")


async def min_delay(awaitable: Awaitable[T], delay: float) -> T:
    """
    Await ``awaitable`` but do not return (or raise) before ``delay`` seconds have passed.
    Keeps the typing indicator visible long enough for fast replies.
    """
    started = time.monotonic()
    try:
        return await awaitable
    finally:
        remaining = delay - (time.monotonic() - started)
        if remaining > 0:
            await asyncio.sleep(remaining)
