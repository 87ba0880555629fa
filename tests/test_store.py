import json

import pytest

from gitignore_client.services.errors import ErrorKind, StorageError
from gitignore_client.services.store import JsonFileStore, MemoryStore


@pytest.mark.asyncio
async def test_memory_store_set_get_delete():
    store = MemoryStore()

    await store.set("k", [1, 2])
    assert await store.get("k") == [1, 2]

    await store.set("k", None)
    assert await store.get("k") is None
    assert store.keys() == []


@pytest.mark.asyncio
async def test_json_file_store_persists_across_instances(tmp_path):
    path = tmp_path / "cache" / "state.json"

    store = JsonFileStore(path)
    await store.set("templates", ["node", "python"])
    await store.set("timestamp", 123)

    reopened = JsonFileStore(path)
    assert await reopened.get("templates") == ["node", "python"]
    assert await reopened.get("timestamp") == 123
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "templates": ["node", "python"],
        "timestamp": 123,
    }


@pytest.mark.asyncio
async def test_json_file_store_delete(tmp_path):
    store = JsonFileStore(tmp_path / "state.json")
    await store.set("k", "v")
    await store.set("k", None)

    assert await JsonFileStore(tmp_path / "state.json").get("k") is None


@pytest.mark.asyncio
async def test_json_file_store_missing_file_is_empty(tmp_path):
    store = JsonFileStore(tmp_path / "absent.json")
    assert await store.get("anything") is None


@pytest.mark.asyncio
async def test_corrupt_file_raises_storage_error(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError) as exc_info:
        await JsonFileStore(path).get("k")

    assert exc_info.value.kind == ErrorKind.STORAGE
    assert isinstance(exc_info.value.cause, json.JSONDecodeError)


@pytest.mark.asyncio
async def test_non_object_file_raises_storage_error(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(StorageError):
        await JsonFileStore(path).get("k")


@pytest.mark.asyncio
async def test_unserializable_value_raises_storage_error(tmp_path):
    store = JsonFileStore(tmp_path / "state.json")

    with pytest.raises(StorageError):
        await store.set("k", object())

    assert await store.get("k") is None
