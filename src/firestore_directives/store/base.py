"""Core document store interfaces."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


class StoreException(Exception):
    """Base exception for store operations."""

    pass


@dataclass(frozen=True)
class DocumentSnapshot:
    """A single document read from the store."""

    id: str
    path: str
    data: dict[str, Any] | None = None

    @property
    def exists(self) -> bool:
        return self.data is not None

    def to_dict(self) -> dict[str, Any] | None:
        """Shallow copy of the stored fields, or None if the document does not exist."""
        if self.data is None:
            return None
        return dict(self.data)


@dataclass(frozen=True)
class CollectionSnapshot:
    """Documents of one collection, in the order the store returned them."""

    path: str
    docs: tuple[DocumentSnapshot, ...] = field(default_factory=tuple)

    @property
    def empty(self) -> bool:
        return not self.docs

    def __iter__(self) -> Iterator[DocumentSnapshot]:
        return iter(self.docs)

    def __len__(self) -> int:
        return len(self.docs)


class DocumentStore(ABC):
    """Abstract base class for hierarchical document stores."""

    @abstractmethod
    async def get_document(self, path: str) -> DocumentSnapshot:
        """Read one document by its full path.

        A missing document is returned as a snapshot whose ``exists`` is False.

        Raises:
            StoreException: On read failure or a malformed path
        """
        pass

    @abstractmethod
    async def get_collection(self, path: str) -> CollectionSnapshot:
        """Read every document directly under a collection path."""
        pass


@dataclass(frozen=True)
class StoreProvider:
    """Request-context entry that hands a store to the directive resolvers."""

    name: str
    app: DocumentStore


def split_path(path: str) -> list[str]:
    """Split a store path into segments, rejecting empty ones."""
    segments = path.strip("/").split("/")
    if not path.strip("/") or any(not segment for segment in segments):
        raise StoreException(f"Invalid store path: {path!r}")
    return segments


def is_document_path(path: str) -> bool:
    """Documents live at even depth (collection/doc/collection/doc...)."""
    return len(split_path(path)) % 2 == 0
