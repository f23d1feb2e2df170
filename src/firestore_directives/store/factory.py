"""Factory for creating document stores from settings."""

from pathlib import Path

from ..config import Settings
from ..logging import get_logger
from . import firestore as firestore_store
from .base import DocumentStore
from .memory import MemoryDocumentStore

logger = get_logger(__name__)


def create_store(settings: Settings, backend: str | None = None) -> DocumentStore:
    """Create a document store from configuration.

    Args:
        settings: Settings carrying store options
        backend: Overrides ``settings.store_backend`` ('firestore' or 'memory')

    Raises:
        ValueError: If the backend is unknown
        ImportError: If the Firestore dependencies are not installed
    """
    backend = (backend or settings.store_backend).lower()

    if backend == "memory":
        if settings.seed_path:
            return MemoryDocumentStore.from_file(Path(settings.seed_path))
        return MemoryDocumentStore()
    elif backend == "firestore":
        if not firestore_store._firestore_available:
            raise ImportError(
                "Firestore store requires additional dependencies. "
                "Install with: pip install firestore-directives[firestore]"
            )
        logger.info(
            "Using Firestore store",
            project_id=settings.firestore_project_id,
            database=settings.firestore_database,
        )
        return firestore_store.FirestoreDocumentStore(
            project_id=settings.firestore_project_id,
            database=settings.firestore_database,
            credentials_path=settings.firestore_credentials_path,
            credentials_json=settings.firestore_credentials_json,
        )
    else:
        raise ValueError(f"Unknown store backend: {backend}")
