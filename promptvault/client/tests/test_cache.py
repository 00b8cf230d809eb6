import json
from pathlib import Path

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from ..cache import (
    CACHE_KEYS,
    EntityKind,
    FileStorage,
    KeyValueStorage,
    LocalCache,
    MemoryStorage,
    RedisStorage,
    StorageError,
)


class BrokenStorage(KeyValueStorage):
    def get_item(self, key):
        raise StorageError("unavailable")

    def set_item(self, key, value):
        raise StorageError("quota exceeded")

    def remove_item(self, key):
        raise StorageError("unavailable")


class FakeRedis:
    def __init__(self, fail: bool = False) -> None:
        self.values = {}
        self.fail = fail

    def get(self, key):
        if self.fail:
            raise RedisConnectionError("down")
        return self.values.get(key)

    def set(self, key, value):
        if self.fail:
            raise RedisConnectionError("down")
        self.values[key] = value

    def delete(self, key):
        self.values.pop(key, None)


def test_cache_round_trips_entities_per_kind() -> None:
    cache = LocalCache(MemoryStorage())

    cache.put(EntityKind.PROMPTS, [{"id": "p-1"}])
    cache.put("folders", [{"id": "f-1"}])

    assert cache.get("prompts") == [{"id": "p-1"}]
    assert cache.get(EntityKind.FOLDERS) == [{"id": "f-1"}]


def test_cache_treats_malformed_data_as_empty() -> None:
    storage = MemoryStorage(
        {
            CACHE_KEYS[EntityKind.PROMPTS]: "{not json",
            CACHE_KEYS[EntityKind.FOLDERS]: json.dumps({"id": "f-1"}),
        }
    )
    cache = LocalCache(storage)

    assert cache.get(EntityKind.PROMPTS) == []
    assert cache.get(EntityKind.FOLDERS) == []


def test_cache_drops_non_object_entries() -> None:
    storage = MemoryStorage({CACHE_KEYS[EntityKind.PROMPTS]: json.dumps([{"id": "p"}, 3, "x"])})

    assert LocalCache(storage).get(EntityKind.PROMPTS) == [{"id": "p"}]


def test_cache_survives_storage_failures() -> None:
    cache = LocalCache(BrokenStorage())

    cache.put(EntityKind.PROMPTS, [{"id": "p-1"}])

    assert cache.get(EntityKind.PROMPTS) == []


def test_unknown_kind_is_rejected() -> None:
    with pytest.raises(ValueError):
        LocalCache(MemoryStorage()).get("tags")


def test_file_storage_persists_between_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "cache.json"

    FileStorage(path).set_item("a", "1")
    FileStorage(path).set_item("b", "2")
    reopened = FileStorage(path)
    reopened.remove_item("a")

    assert reopened.get_item("a") is None
    assert reopened.get_item("b") == "2"
    assert not (tmp_path / "nested" / "cache.json.tmp").exists()


def test_file_storage_reports_corruption_and_recovers_on_write(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    path.write_text("[broken", encoding="utf-8")
    storage = FileStorage(path)

    with pytest.raises(StorageError):
        storage.get_item("a")
    assert LocalCache(storage).get(EntityKind.PROMPTS) == []

    storage.set_item("a", "1")
    assert storage.get_item("a") == "1"


def test_redis_storage_prefixes_keys() -> None:
    client = FakeRedis()
    storage = RedisStorage(client, prefix="pv:")

    storage.set_item("k", "v")

    assert client.values == {"pv:k": "v"}
    assert storage.get_item("k") == "v"
    storage.remove_item("k")
    assert storage.get_item("k") is None


def test_redis_errors_become_storage_errors() -> None:
    storage = RedisStorage(FakeRedis(fail=True))

    with pytest.raises(StorageError):
        storage.get_item("k")
    assert LocalCache(storage).get(EntityKind.FOLDERS) == []
