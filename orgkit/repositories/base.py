"""
Base class for repositories.

Repositories are thin CRUD layers over the document store. Every store
call is bounded by a per-operation timeout, and every failure is
translated into a typed Result instead of escaping as an exception.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable

from orgkit.config import RepositoryTimeouts
from orgkit.core.result import ErrorKind, Result
from orgkit.storage.base import MetadataStorage

logger = logging.getLogger(__name__)


class Repository:
    """
    Base repository over one collection.
    
    Subclasses set `collection` and, when backend failures should be
    reported differently, `failure_kind`.
    """
    
    collection: str
    failure_kind: ErrorKind = ErrorKind.STORAGE_ERROR
    
    def __init__(
        self,
        storage: MetadataStorage,
        timeouts: RepositoryTimeouts | None = None,
    ):
        self.storage = storage
        self.timeouts = timeouts or RepositoryTimeouts()
    
    async def _bounded(
        self,
        awaitable: Awaitable[Any],
        timeout: float,
        action: str,
    ) -> Result[Any]:
        """
        Await a store call with a deadline.
        
        Args:
            awaitable: The store call
            timeout: Deadline in seconds
            action: What is being done, for messages ("finding member by id")
        
        Returns:
            Result with the call's return value, TIMED_OUT, or `failure_kind`
        """
        try:
            value = await asyncio.wait_for(awaitable, timeout)
        except asyncio.TimeoutError:
            message = f"timed out {action}"
            logger.info(message)
            return Result.err(ErrorKind.TIMED_OUT, message)
        except Exception as e:
            message = f"failed {action}: {e}"
            logger.warning(message)
            return Result.err(self.failure_kind, message)
        
        return Result.ok(value)
    
    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(collection={self.collection})>"
