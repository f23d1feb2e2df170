"""Google Cloud Firestore document store."""

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from google.cloud import firestore

try:
    from google.cloud import firestore
    from google.oauth2 import service_account

    _firestore_available = True
except ImportError:
    firestore = None
    service_account = None
    _firestore_available = False

from ..logging import get_logger
from .base import (
    CollectionSnapshot,
    DocumentSnapshot,
    DocumentStore,
    StoreException,
    is_document_path,
)

logger = get_logger(__name__)

SCOPES = ["https://www.googleapis.com/auth/datastore"]


class FirestoreDocumentStore(DocumentStore):
    """Firestore reads through the native async client."""

    def __init__(
        self,
        project_id: str | None = None,
        database: str | None = None,
        credentials_path: str | None = None,
        credentials_json: str | None = None,
        client: Any | None = None,
    ):
        if client is None and not _firestore_available:
            raise ImportError(
                "google-cloud-firestore is required for FirestoreDocumentStore. "
                "Install with: pip install firestore-directives[firestore]"
            )

        self.project_id = project_id
        self.database = database
        self.credentials_path = credentials_path
        self.credentials_json = credentials_json

        # Client will be initialized lazily on first use
        self._client: Any | None = client

    def _get_client(self) -> Any:
        """Get or create the Firestore client with proper authentication."""
        if self._client is None:
            if firestore is None:
                raise ImportError("google-cloud-firestore is required for FirestoreDocumentStore")

            try:
                credentials = None
                if self.credentials_json:
                    credentials = service_account.Credentials.from_service_account_info(
                        json.loads(self.credentials_json), scopes=SCOPES
                    )
                elif self.credentials_path:
                    credentials_path = Path(self.credentials_path)
                    if not credentials_path.exists():
                        raise FileNotFoundError(
                            f"Credentials file not found: {self.credentials_path}"
                        )
                    credentials = service_account.Credentials.from_service_account_file(
                        str(credentials_path), scopes=SCOPES
                    )

                kwargs: dict[str, Any] = {"project": self.project_id}
                if credentials is not None:
                    kwargs["credentials"] = credentials
                if self.database:
                    kwargs["database"] = self.database
                self._client = firestore.AsyncClient(**kwargs)

            except Exception as e:
                logger.error("Failed to initialize Firestore client", error=str(e))
                raise StoreException(f"Firestore client initialization failed: {e}") from e

        return self._client

    async def get_document(self, path: str) -> DocumentSnapshot:
        """Read one document; a missing document yields ``exists == False``."""
        if not is_document_path(path):
            raise StoreException(f"Not a document path: {path!r}")

        try:
            client = self._get_client()
            snapshot = await client.document(path).get()
        except StoreException:
            raise
        except Exception as e:
            logger.error("Failed to read Firestore document", path=path, error=str(e))
            raise StoreException(f"Firestore document read failed: {e}") from e

        return DocumentSnapshot(
            id=snapshot.id,
            path=path,
            data=snapshot.to_dict() if snapshot.exists else None,
        )

    async def get_collection(self, path: str) -> CollectionSnapshot:
        """Read every document of a collection, in Firestore's order."""
        if is_document_path(path):
            raise StoreException(f"Not a collection path: {path!r}")

        try:
            client = self._get_client()
            snapshots = await client.collection(path).get()
        except StoreException:
            raise
        except Exception as e:
            logger.error("Failed to read Firestore collection", path=path, error=str(e))
            raise StoreException(f"Firestore collection read failed: {e}") from e

        docs = tuple(
            DocumentSnapshot(
                id=snapshot.id,
                path=f"{path.rstrip('/')}/{snapshot.id}",
                data=snapshot.to_dict() or {},
            )
            for snapshot in snapshots
        )
        return CollectionSnapshot(path=path, docs=docs)
