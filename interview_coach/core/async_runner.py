import asyncio
import logging
from typing import Any, Awaitable, Optional

logger = logging.getLogger(__name__)


def run_async_in_new_loop(coro: Awaitable[Any], timeout: Optional[float] = None) -> Any:
    """
    Drive a coroutine to completion from a synchronous Flask handler.

    Each call gets a private event loop that is closed afterwards, so no
    loop-bound object may outlive the call. A timeout cancels the coroutine
    and re-raises asyncio.TimeoutError.
    """
    if timeout:
        coro = asyncio.wait_for(coro, timeout=timeout)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    except asyncio.TimeoutError:
        logger.error(f"AI request timed out after {timeout} seconds")
        raise
    finally:
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.close()
        asyncio.set_event_loop(None)
