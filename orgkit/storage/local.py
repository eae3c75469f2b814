"""
In-memory document store for development and tests.

Documents are deep-copied on the way in and out, so callers never share
state with the store.
"""

from __future__ import annotations

import copy
from collections import defaultdict
from typing import Any

from orgkit.core.utils import utc_now
from orgkit.storage.base import Document, MetadataStorage


class InMemoryMetadataStorage(MetadataStorage):
    
    def __init__(self):
        self._collections: defaultdict[str, dict[str, Document]] = defaultdict(dict)
    
    async def save(self, collection: str, id: str, data: Document) -> None:
        doc = copy.deepcopy(data)
        doc["_id"] = id
        self._collections[collection][id] = _touch(doc)
    
    async def get(self, collection: str, id: str) -> Document | None:
        return copy.deepcopy(self._collections[collection].get(id))
    
    async def get_many(self, collection: str, ids: list[str]) -> list[Document]:
        docs = self._collections[collection]
        return [copy.deepcopy(docs[i]) for i in ids if i in docs]
    
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Document]:
        matching = [
            doc for doc in self._collections[collection].values()
            if _matches(doc, filters or {})
        ]
        return copy.deepcopy(matching[offset:offset + limit])
    
    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> bool:
        doc = self._collections[collection].get(id)
        if doc is None:
            return False
        
        doc.update(copy.deepcopy(updates))
        _touch(doc)
        return True


def _matches(doc: Document, filters: dict[str, Any]) -> bool:
    return all(doc.get(key) == value for key, value in filters.items())


def _touch(doc: Document) -> Document:
    doc["_updated_at"] = utc_now().isoformat()
    return doc


def create_local_storage() -> MetadataStorage:
    """Create the in-memory document store."""
    return InMemoryMetadataStorage()
