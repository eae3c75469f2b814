"""
Storage abstractions.

- MetadataStorage → document store for organizations, roles, members
"""

from orgkit.storage.base import MetadataStorage, Collections
from orgkit.storage.local import InMemoryMetadataStorage, create_local_storage

__all__ = [
    "MetadataStorage",
    "Collections",
    "InMemoryMetadataStorage",
    "create_local_storage",
]
