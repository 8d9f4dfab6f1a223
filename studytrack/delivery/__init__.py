"""
Persistence for the concept collection.

Components:
- KeyValueStorage / JsonFileStorage / MemoryStorage: durable key-value layer
- ConceptRepository: load()/save() of the collection
- ConceptStore: in-memory collection with change notification
"""

from .state_store import (
    ConceptNotFoundError,
    ConceptRepository,
    ConceptStore,
    JsonFileStorage,
    KeyValueStorage,
    MemoryStorage,
)

__all__ = [
    "ConceptNotFoundError",
    "ConceptRepository",
    "ConceptStore",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
]
