import asyncio
from typing import Awaitable, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


async def with_deadline(
    awaitable: "Awaitable[T]",
    timeout: "float",
    fallback: "T",
    name: "str" = "task",
) -> "T":
    """
    awaits the given awaitable for at most timeout seconds. On expiry
    or on any error the fallback is returned instead; a late result is
    discarded since wait_for cancels the pending work.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except TimeoutError:
        logger.debug("deadline_expired", task=name, timeout=timeout)
    except Exception:
        logger.warning("deadline_task_failed", task=name, exc_info=True)
    return fallback
