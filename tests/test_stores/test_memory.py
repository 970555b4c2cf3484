"""Tests for InMemoryStore."""

import pytest

from sealed_cache.exceptions import StorageUnavailableError
from sealed_cache.stores import InMemoryStore


@pytest.fixture
def store():
    return InMemoryStore()


async def test_get_nonexistent(store):
    assert await store.get("p", "key") is None


async def test_put_and_get(store):
    await store.put("p", "k", {"val": 1})
    assert await store.get("p", "k") == {"val": 1}


async def test_overwrite_replaces_wholesale(store):
    await store.put("p", "k", {"a": 1, "b": 2})
    await store.put("p", "k", {"a": 3})
    assert await store.get("p", "k") == {"a": 3}


async def test_returned_record_is_a_copy(store):
    await store.put("p", "k", {"v": [1]})
    record = await store.get("p", "k")
    record["v"].append(2)
    assert await store.get("p", "k") == {"v": [1]}


async def test_delete(store):
    await store.put("p", "k", {"v": 1})
    await store.delete("p", "k")
    assert await store.get("p", "k") is None


async def test_delete_nonexistent(store):
    await store.delete("p", "nope")  # should not raise


async def test_list_all(store):
    await store.put("p", "a", {"v": 1})
    await store.put("p", "b", {"v": 2})
    await store.put("other", "c", {"v": 3})
    assert sorted(await store.list_all("p")) == [("a", {"v": 1}), ("b", {"v": 2})]


async def test_list_all_empty(store):
    assert await store.list_all("p") == []


async def test_clear(store):
    await store.put("p", "a", {"v": 1})
    await store.put("other", "c", {"v": 3})

    await store.clear("p")
    assert await store.list_all("p") == []
    assert await store.get("other", "c") == {"v": 3}


async def test_list_partitions(store):
    await store.put("p1", "k", {})
    await store.put("p2", "k", {})
    await store.delete("p2", "k")
    assert await store.list_partitions() == ["p1"]


async def test_partition_isolation(store):
    await store.put("p1", "k", {"val": 1})
    await store.put("p2", "k", {"val": 2})
    assert (await store.get("p1", "k"))["val"] == 1
    assert (await store.get("p2", "k"))["val"] == 2


async def test_unavailable_store_raises_everywhere():
    store = InMemoryStore(available=False)
    with pytest.raises(StorageUnavailableError):
        await store.get("p", "k")
    with pytest.raises(StorageUnavailableError):
        await store.put("p", "k", {})
    with pytest.raises(StorageUnavailableError):
        await store.delete("p", "k")
    with pytest.raises(StorageUnavailableError):
        await store.list_all("p")
