"""Cloud Storage Adapter

Implementação do DataStore sobre o Google Cloud Storage.
Cada par (dono, coleção) é um objeto JSON no mesmo bucket.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from google.api_core.exceptions import NotFound
from google.cloud import storage

from biggestor.domain.errors import StorageWriteError
from biggestor.domain.ports import DataStore

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/json;charset=UTF-8"


class GCSDataStore(DataStore):
    """
    DataStore sobre GCS.

    Convenção de caminho: {owner_key}/{collection_key}.json
    """

    def __init__(self, bucket_name: str, client: storage.Client | None = None) -> None:
        """
        Args:
            bucket_name: nome do bucket
            client: cliente GCS já inicializado (padrão: credenciais ADC)
        """
        self._client = client or storage.Client()
        self._bucket = self._client.bucket(bucket_name)
        self._bucket_name = bucket_name

    @staticmethod
    def blob_path(owner_key: str, collection_key: str) -> str:
        return f"{owner_key}/{collection_key}.json"

    def get(self, owner_key: str, collection_key: str) -> Any | None:
        """
        Lê e decodifica o documento.

        Returns:
            Valor JSON decodificado, ou None se o objeto não existir ou a
            leitura falhar (falhas são apenas registradas no log).
        """
        path = self.blob_path(owner_key, collection_key)
        blob = self._bucket.blob(path)
        try:
            raw = blob.download_as_bytes()
        except NotFound:
            return None
        except Exception as e:
            logger.error(
                "Failed to read: bucket=%s, path=%s, error=%s",
                self._bucket_name,
                path,
                e,
            )
            return None

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error("Corrupt JSON document: path=%s, error=%s", path, e)
            return None

    def set(self, owner_key: str, collection_key: str, data: Any) -> None:
        """
        Grava o documento, substituindo o conteúdo anterior.

        Raises:
            StorageWriteError: falha na gravação
        """
        path = self.blob_path(owner_key, collection_key)
        blob = self._bucket.blob(path)
        try:
            payload = json.dumps(data, ensure_ascii=False)
            blob.upload_from_string(payload, content_type=CONTENT_TYPE)
        except Exception as e:
            logger.error(
                "Failed to write: bucket=%s, path=%s, error=%s",
                self._bucket_name,
                path,
                e,
            )
            raise StorageWriteError(owner_key, collection_key, str(e)) from e
        logger.debug("Saved: path=%s, size=%d bytes", path, len(payload))

    def delete(self, owner_key: str, collection_key: str) -> None:
        """Remove o documento. Falhas são registradas e ignoradas"""
        path = self.blob_path(owner_key, collection_key)
        blob = self._bucket.blob(path)
        try:
            blob.delete()
            logger.info("Deleted: bucket=%s, path=%s", self._bucket_name, path)
        except Exception:
            logger.warning(
                "Failed to delete (may not exist): bucket=%s, path=%s",
                self._bucket_name,
                path,
            )
