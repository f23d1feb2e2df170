"""Document store collaborators for directive resolvers.

Main components:
- DocumentStore: Abstract base class for store implementations
- MemoryDocumentStore: Dict-backed store for development and tests
- FirestoreDocumentStore: Google Cloud Firestore (optional dependency)
- StoreProvider: Request-context entry carrying a store handle
"""

from .base import (
    CollectionSnapshot,
    DocumentSnapshot,
    DocumentStore,
    StoreException,
    StoreProvider,
)
from .factory import create_store
from .memory import MemoryDocumentStore

__all__ = [
    "CollectionSnapshot",
    "DocumentSnapshot",
    "DocumentStore",
    "MemoryDocumentStore",
    "StoreException",
    "StoreProvider",
    "create_store",
]
