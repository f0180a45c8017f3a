"""Testes do GCSDataStore

O cliente do Cloud Storage é substituído por MagicMock.
"""

import json
from unittest.mock import MagicMock

import pytest
from google.api_core.exceptions import NotFound, ServiceUnavailable

from biggestor.adapters.cloud_storage import CONTENT_TYPE, GCSDataStore
from biggestor.domain.errors import StorageWriteError


@pytest.fixture
def mock_client():
    return MagicMock()


@pytest.fixture
def blob(mock_client):
    return mock_client.bucket.return_value.blob.return_value


@pytest.fixture
def gcs(mock_client):
    return GCSDataStore("big-gestor-data", client=mock_client)


def test_blob_path():
    assert GCSDataStore.blob_path("uid-ana", "jobs") == "uid-ana/jobs.json"


class TestGet:
    def test_decodes_json(self, gcs, mock_client, blob):
        """Documento existente é decodificado"""
        blob.download_as_bytes.return_value = json.dumps([{"id": "j1"}]).encode("utf-8")

        assert gcs.get("uid-ana", "jobs") == [{"id": "j1"}]
        mock_client.bucket.assert_called_once_with("big-gestor-data")
        mock_client.bucket.return_value.blob.assert_called_once_with("uid-ana/jobs.json")

    def test_missing_object_returns_none(self, gcs, blob):
        blob.download_as_bytes.side_effect = NotFound("no such object")

        assert gcs.get("uid-ana", "jobs") is None

    def test_transport_error_returns_none(self, gcs, blob, caplog):
        """Falha de leitura é registrada e tratada como documento ausente"""
        blob.download_as_bytes.side_effect = ServiceUnavailable("503")

        assert gcs.get("uid-ana", "jobs") is None
        assert "Failed to read" in caplog.text

    def test_corrupt_json_returns_none(self, gcs, blob):
        blob.download_as_bytes.return_value = b"{corrompido"

        assert gcs.get("uid-ana", "settings") is None


class TestSet:
    def test_uploads_utf8_json(self, gcs, blob):
        gcs.set("uid-ana", "clients", [{"name": "João"}])

        blob.upload_from_string.assert_called_once_with(
            '[{"name": "João"}]', content_type=CONTENT_TYPE
        )

    def test_failure_raises_storage_write_error(self, gcs, blob):
        blob.upload_from_string.side_effect = ServiceUnavailable("503")

        with pytest.raises(StorageWriteError) as exc_info:
            gcs.set("uid-ana", "jobs", [])

        assert exc_info.value.owner_key == "uid-ana"
        assert exc_info.value.collection_key == "jobs"


class TestDelete:
    def test_deletes_blob(self, gcs, blob):
        gcs.delete("uid-ana", "jobs")

        blob.delete.assert_called_once()

    def test_missing_blob_is_ignored(self, gcs, blob):
        blob.delete.side_effect = NotFound("gone")

        gcs.delete("uid-ana", "jobs")
