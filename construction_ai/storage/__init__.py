"""Repository and blob storage module."""

# Import backends to trigger registration via decorators
from construction_ai.storage import memory
from construction_ai.storage.blob import LocalBlobStore, StoredObject
from construction_ai.storage.factory import Repositories, StorageFactory

__all__ = ["LocalBlobStore", "Repositories", "StorageFactory", "StoredObject", "memory"]
