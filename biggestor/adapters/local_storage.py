"""Armazenamento local (modo offline)

LocalStorage: um arquivo por chave num diretório do dispositivo, equivalente
ao localStorage do navegador.
LocalDataStore: DataStore sobre um KeyValueStorage, usado quando não há
bucket configurado.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any
from urllib.parse import quote

from biggestor.domain.ports import DataStore, KeyValueStorage

logger = logging.getLogger(__name__)


class LocalStorage(KeyValueStorage):
    """KeyValueStorage baseado em arquivos"""

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        # chaves podem conter "/" e outros caracteres inválidos em nomes de arquivo
        return self._dir / quote(key, safe="")

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class LocalDataStore(DataStore):
    """
    DataStore de dispositivo único.

    Chave: big_offline_data_{owner_key}_{collection_key}
    Leituras com falha retornam None; falhas de gravação são apenas registradas.
    """

    KEY_PREFIX = "big_offline_data"

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    @classmethod
    def storage_key(cls, owner_key: str, collection_key: str) -> str:
        return f"{cls.KEY_PREFIX}_{owner_key}_{collection_key}"

    def get(self, owner_key: str, collection_key: str) -> Any | None:
        key = self.storage_key(owner_key, collection_key)
        try:
            raw = self._storage.get_item(key)
            if raw is None:
                return None
            return json.loads(raw)
        except Exception as e:
            logger.error("Failed to read local document: key=%s, error=%s", key, e)
            return None

    def set(self, owner_key: str, collection_key: str, data: Any) -> None:
        key = self.storage_key(owner_key, collection_key)
        try:
            self._storage.set_item(key, json.dumps(data, ensure_ascii=False))
        except Exception as e:
            logger.error("Failed to write local document: key=%s, error=%s", key, e)

    def delete(self, owner_key: str, collection_key: str) -> None:
        key = self.storage_key(owner_key, collection_key)
        try:
            self._storage.remove_item(key)
        except Exception as e:
            logger.warning("Failed to delete local document: key=%s, error=%s", key, e)
