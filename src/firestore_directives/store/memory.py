"""In-memory document store for development and tests."""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from ..logging import get_logger
from .base import (
    CollectionSnapshot,
    DocumentSnapshot,
    DocumentStore,
    StoreException,
    is_document_path,
    split_path,
)

logger = get_logger(__name__)


class MemoryDocumentStore(DocumentStore):
    """Documents kept in a dict keyed by their full path.

    Collection reads return documents ordered by document ID, matching
    Firestore's default ordering.
    """

    def __init__(self, documents: Mapping[str, Mapping[str, Any]] | None = None):
        self._documents: dict[str, dict[str, Any]] = {}
        for path, data in (documents or {}).items():
            self.set_document(path, data)

    @classmethod
    def from_file(cls, seed_path: Path) -> "MemoryDocumentStore":
        """Load documents from a JSON or YAML mapping of ``path -> fields``."""
        try:
            with open(seed_path) as f:
                if seed_path.suffix.lower() in (".yaml", ".yml"):
                    documents = yaml.safe_load(f) or {}
                else:
                    documents = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise StoreException(f"Failed to load seed documents from {seed_path}: {e}") from e

        if not isinstance(documents, dict):
            raise StoreException(f"Seed file {seed_path} must contain a mapping of paths")

        store = cls(documents)
        logger.info("Seeded in-memory store", path=str(seed_path), documents=len(store))
        return store

    def _normalize(self, path: str) -> str:
        return "/".join(split_path(path))

    def set_document(self, path: str, data: Mapping[str, Any]) -> None:
        """Create or replace the document at ``path``."""
        if not is_document_path(path):
            raise StoreException(f"Not a document path: {path!r}")
        self._documents[self._normalize(path)] = dict(data)

    def delete_document(self, path: str) -> bool:
        return self._documents.pop(self._normalize(path), None) is not None

    def __len__(self) -> int:
        return len(self._documents)

    async def get_document(self, path: str) -> DocumentSnapshot:
        if not is_document_path(path):
            raise StoreException(f"Not a document path: {path!r}")

        key = self._normalize(path)
        data = self._documents.get(key)
        return DocumentSnapshot(
            id=key.rsplit("/", 1)[-1],
            path=key,
            data=dict(data) if data is not None else None,
        )

    async def get_collection(self, path: str) -> CollectionSnapshot:
        if is_document_path(path):
            raise StoreException(f"Not a collection path: {path!r}")

        parent = self._normalize(path)
        docs = []
        for key in self._documents:
            collection, _, doc_id = key.rpartition("/")
            if collection == parent:
                docs.append(DocumentSnapshot(id=doc_id, path=key, data=dict(self._documents[key])))

        docs.sort(key=lambda doc: doc.id)
        return CollectionSnapshot(path=parent, docs=tuple(docs))
