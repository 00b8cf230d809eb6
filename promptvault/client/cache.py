from __future__ import annotations

import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when the key-value storage cannot be read or written."""


class EntityKind(str, Enum):
    PROMPTS = "prompts"
    FOLDERS = "folders"


CACHE_KEYS: Dict[EntityKind, str] = {
    EntityKind.PROMPTS: "promptvault-prompts-cache",
    EntityKind.FOLDERS: "promptvault-folders-cache",
}


class KeyValueStorage:
    """String-keyed synchronous storage, shaped like browser local storage."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._items)


class FileStorage(KeyValueStorage):
    """Keeps every key in one JSON object file, replaced atomically on write."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path).expanduser()

    def _read(self) -> Dict[str, str]:
        try:
            raw_text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StorageError(f"Unable to read storage file '{self.path}': {exc}") from exc

        try:
            decoded = json.loads(raw_text) if raw_text.strip() else {}
        except json.JSONDecodeError as exc:
            raise StorageError(f"Storage file '{self.path}' is not valid JSON") from exc
        if not isinstance(decoded, dict):
            raise StorageError(f"Storage file '{self.path}' does not contain a JSON object")
        return {str(key): value for key, value in decoded.items() if isinstance(value, str)}

    def _read_for_update(self) -> Dict[str, str]:
        try:
            return self._read()
        except StorageError as exc:
            logger.warning("%s. Starting from an empty store.", exc)
            return {}

    def _write(self, items: Dict[str, str]) -> None:
        temp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(json.dumps(items, ensure_ascii=False), encoding="utf-8")
            os.replace(temp_path, self.path)
        except OSError as exc:
            raise StorageError(f"Unable to write storage file '{self.path}': {exc}") from exc

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_for_update()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read_for_update()
        if items.pop(key, None) is not None:
            self._write(items)


class RedisStorage(KeyValueStorage):
    def __init__(self, client: "redis.Redis", prefix: str = "promptvault:") -> None:
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "promptvault:") -> "RedisStorage":
        return cls(redis.Redis.from_url(url, encoding="utf-8", decode_responses=True), prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get_item(self, key: str) -> Optional[str]:
        try:
            return self._client.get(self._key(key))
        except RedisError as exc:
            raise StorageError(f"Redis read of '{key}' failed: {exc}") from exc

    def set_item(self, key: str, value: str) -> None:
        try:
            self._client.set(self._key(key), value)
        except RedisError as exc:
            raise StorageError(f"Redis write of '{key}' failed: {exc}") from exc

    def remove_item(self, key: str) -> None:
        try:
            self._client.delete(self._key(key))
        except RedisError as exc:
            raise StorageError(f"Redis delete of '{key}' failed: {exc}") from exc


class LocalCache:
    """Look-aside copy of the remote collections.

    Reads never raise: unreadable or malformed data is an empty collection.
    Writes that fail are logged and dropped.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    def get(self, kind: EntityKind) -> List[Dict[str, Any]]:
        kind = EntityKind(kind)
        try:
            raw = self.storage.get_item(CACHE_KEYS[kind])
        except StorageError as exc:
            logger.error("Failed to read %s cache: %s", kind.value, exc)
            return []
        if not raw:
            return []
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            logger.error("Failed to parse %s cache; treating it as empty", kind.value)
            return []
        if not isinstance(decoded, list):
            logger.error("Cached %s is not a list; treating it as empty", kind.value)
            return []
        return [entry for entry in decoded if isinstance(entry, dict)]

    def put(self, kind: EntityKind, entities: Sequence[Mapping[str, Any]]) -> None:
        kind = EntityKind(kind)
        try:
            payload = json.dumps([dict(entity) for entity in entities], ensure_ascii=False)
            self.storage.set_item(CACHE_KEYS[kind], payload)
        except (StorageError, TypeError, ValueError) as exc:
            logger.error("Failed to write %s cache: %s", kind.value, exc)


__all__ = [
    "CACHE_KEYS",
    "EntityKind",
    "FileStorage",
    "KeyValueStorage",
    "LocalCache",
    "MemoryStorage",
    "RedisStorage",
    "StorageError",
]
