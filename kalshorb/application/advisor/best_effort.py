"""
Best-effort side effects.

Chat persistence must never block a reply. Each call is attempted
exactly once with no retry; a PersistenceError is logged and dropped.
"""

import logging
from typing import Awaitable, Optional, TypeVar

from kalshorb.domain.advisor.errors import PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def best_effort(
    operation: Awaitable[T], description: str, default: Optional[T] = None
) -> Optional[T]:
    """Await a datastore operation, swallowing persistence failures.

    Args:
        operation: The awaitable to run once.
        description: Short label used in the log line.
        default: Value returned when the operation fails.

    Returns:
        The operation's result, or ``default`` on PersistenceError.
    """
    try:
        return await operation
    except PersistenceError as exc:
        logger.warning("Best-effort %s failed: %s", description, exc.reason)
        return default
