import asyncio
from typing import Awaitable, Optional, TypeVar

from loguru import logger
from neopipe import Err, Ok, Result

T = TypeVar("T")


async def capture(awaitable: Awaitable[T], label: str, timeout: Optional[float] = None) -> Result[T, str]:
    """
    Await `awaitable` and wrap the outcome in a Result.

    Timeouts and exceptions become Err with a readable message, so sibling
    lookups gathered alongside this one are never cancelled by its failure.
    """
    try:
        if timeout is not None:
            value = await asyncio.wait_for(awaitable, timeout=timeout)
        else:
            value = await awaitable
        return Ok(value)
    except asyncio.TimeoutError:
        message = f"{label} timed out after {timeout:g}s" if timeout is not None else f"{label} timed out"
        logger.warning(message)
        return Err(message)
    except Exception as e:
        logger.warning(f"{label} failed: {e}")
        return Err(str(e) or e.__class__.__name__)
