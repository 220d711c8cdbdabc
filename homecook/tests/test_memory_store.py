# homecook/tests/test_memory_store.py
import pytest

from homecook.services.errors import NotFound
from homecook.store.base import Filter, contains, eq, gt, gte, in_, not_in


async def _seed(store):
    await store.put("things", "a", {"n": 3, "tags": ["x"], "kind": "red"})
    await store.put("things", "b", {"n": 1, "tags": ["x", "y"], "kind": "blue"})
    await store.put("things", "c", {"tags": [], "kind": "red"})
    await store.put("things", "d", {"n": 3, "tags": ["y"], "kind": "green"})
    return store


async def _ids(store, filters=(), **kwargs):
    return [d["id"] for d in await store.query("things", filters, **kwargs)]


@pytest.mark.asyncio
async def test_filters(store):
    seeded = await _seed(store)
    assert await _ids(seeded, [eq("kind", "red")]) == ["a", "c"]
    assert await _ids(seeded, [in_("kind", ["blue", "green"])]) == ["b", "d"]
    assert await _ids(seeded, [not_in("kind", ["red"])]) == ["b", "d"]
    assert await _ids(seeded, [gt("n", 1)]) == ["a", "d"]
    assert await _ids(seeded, [gte("n", 1)]) == ["a", "b", "d"]
    assert await _ids(seeded, [contains("tags", "y"), eq("kind", "blue")]) == ["b"]


@pytest.mark.asyncio
async def test_ordering_is_stable_with_missing_values_last(store):
    seeded = await _seed(store)
    assert await _ids(seeded, order_by="n") == ["b", "a", "d", "c"]
    assert await _ids(seeded, order_by="n", descending=True) == ["a", "d", "b", "c"]
    assert await _ids(seeded, order_by="n", descending=True, limit=2) == ["a", "d"]


@pytest.mark.asyncio
async def test_documents_are_copies(store):
    seeded = await _seed(store)
    doc = await seeded.get("things", "a")
    doc["tags"].append("mutated")
    assert (await seeded.get("things", "a"))["tags"] == ["x"]


@pytest.mark.asyncio
async def test_patch_and_delete(store):
    seeded = await _seed(store)
    patched = await seeded.patch("things", "a", {"kind": "blue"})
    assert patched == {"n": 3, "tags": ["x"], "kind": "blue", "id": "a"}
    with pytest.raises(NotFound):
        await seeded.patch("things", "zzz", {"kind": "blue"})
    await seeded.delete("things", "a")
    await seeded.delete("things", "a")
    assert await seeded.get("things", "a") is None


def test_unknown_filter_op_rejected():
    with pytest.raises(ValueError):
        Filter("n", "between", (1, 2))
