"""Tests for the Firestore document store."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from firestore_directives.store.base import StoreException
from firestore_directives.store.firestore import FirestoreDocumentStore


def _snapshot(doc_id, data):
    snapshot = MagicMock()
    snapshot.id = doc_id
    snapshot.exists = data is not None
    snapshot.to_dict.return_value = data
    return snapshot


class TestFirestoreDocumentStore:
    @pytest.fixture
    def client(self):
        return MagicMock()

    @pytest.fixture
    def store(self, client):
        return FirestoreDocumentStore(project_id="test-project", client=client)

    @pytest.mark.asyncio
    async def test_get_document(self, store, client):
        client.document.return_value.get = AsyncMock(return_value=_snapshot("u1", {"name": "Ann"}))

        snapshot = await store.get_document("users/u1")

        client.document.assert_called_once_with("users/u1")
        assert snapshot.exists
        assert snapshot.to_dict() == {"name": "Ann"}

    @pytest.mark.asyncio
    async def test_get_missing_document(self, store, client):
        client.document.return_value.get = AsyncMock(return_value=_snapshot("u9", None))

        snapshot = await store.get_document("users/u9")

        assert not snapshot.exists
        assert snapshot.id == "u9"

    @pytest.mark.asyncio
    async def test_get_collection_keeps_client_order(self, store, client):
        client.collection.return_value.get = AsyncMock(
            return_value=[_snapshot("o2", {"item": "pen"}), _snapshot("o1", {"item": "book"})]
        )

        snapshot = await store.get_collection("users/u1/orders")

        client.collection.assert_called_once_with("users/u1/orders")
        assert [doc.id for doc in snapshot] == ["o2", "o1"]
        assert snapshot.docs[0].path == "users/u1/orders/o2"

    @pytest.mark.asyncio
    async def test_read_failure_wrapped(self, store, client):
        client.document.return_value.get = AsyncMock(side_effect=RuntimeError("unavailable"))

        with pytest.raises(StoreException, match="Firestore document read failed"):
            await store.get_document("users/u1")

    @pytest.mark.asyncio
    async def test_collection_failure_wrapped(self, store, client):
        client.collection.return_value.get = AsyncMock(side_effect=RuntimeError("denied"))

        with pytest.raises(StoreException, match="Firestore collection read failed"):
            await store.get_collection("users")

    @pytest.mark.asyncio
    async def test_malformed_paths_rejected_before_client_use(self, store, client):
        with pytest.raises(StoreException):
            await store.get_document("users")
        with pytest.raises(StoreException):
            await store.get_collection("users/u1")

        client.document.assert_not_called()
        client.collection.assert_not_called()


class TestClientInitialization:
    def test_client_is_lazy(self):
        pytest.importorskip("google.cloud.firestore", reason="google-cloud-firestore not available")

        store = FirestoreDocumentStore(
            project_id="test-project", credentials_path="/nonexistent/path.json"
        )

        assert store._client is None

    @pytest.mark.asyncio
    async def test_missing_credentials_file(self):
        pytest.importorskip("google.cloud.firestore", reason="google-cloud-firestore not available")

        store = FirestoreDocumentStore(
            project_id="test-project", credentials_path="/nonexistent/path.json"
        )

        with pytest.raises(StoreException, match="Credentials file not found"):
            await store.get_document("users/u1")

    def test_unavailable_library_without_client(self):
        with patch("firestore_directives.store.firestore._firestore_available", False):
            with pytest.raises(ImportError):
                FirestoreDocumentStore(project_id="test-project")
