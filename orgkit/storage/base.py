"""
Document store interface.

Repositories only talk to this interface, so the backing store (in
memory, MongoDB, ...) can change without touching them. A single
instance is created at startup and shared by all requests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


Document = dict[str, Any]


# =============================================================================
# Storage Interface
# =============================================================================


class MetadataStorage(ABC):
    """
    Collections of JSON-like documents keyed by id.
    
    Stored documents come back with their id under "_id". Updates of
    a single document must be atomic.
    """
    
    @abstractmethod
    async def save(self, collection: str, id: str, data: Document) -> None:
        """Insert or replace the document `id`."""
        ...
    
    @abstractmethod
    async def get(self, collection: str, id: str) -> Document | None:
        ...
    
    @abstractmethod
    async def get_many(self, collection: str, ids: list[str]) -> list[Document]:
        """Documents for `ids`, in that order. Unknown ids are skipped."""
        ...
    
    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Document]:
        """Documents whose fields equal every value in `filters`."""
        ...
    
    @abstractmethod
    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> bool:
        """
        Set the given fields on document `id`.
        
        Returns False when no document matched.
        """
        ...


class Collections:
    ORGANIZATIONS = "organizations"
    ROLES = "roles"
    MEMBERS = "members"
