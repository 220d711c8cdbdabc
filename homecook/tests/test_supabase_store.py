# homecook/tests/test_supabase_store.py
from types import SimpleNamespace

import pytest

from homecook.config.settings import Settings
from homecook.config.supabase import SupabaseClient
from homecook.services.errors import NotFound, StoreUnavailable
from homecook.store.base import ORDERS, contains, eq, not_in
from homecook.store.supabase_store import SupabaseDocumentStore, _parse_supabase_response


@pytest.fixture
def supa_store(fake_supabase):
    return SupabaseDocumentStore(fake_supabase)


def test_parse_response_shapes():
    assert _parse_supabase_response(None)["ok"] is False
    assert _parse_supabase_response(SimpleNamespace(data=[1], status_code=200))["data"] == [1]
    assert _parse_supabase_response({"data": [], "status_code": 500})["ok"] is False
    assert _parse_supabase_response({"records": [{"id": "a"}]})["data"] == [{"id": "a"}]


@pytest.mark.asyncio
async def test_put_get_patch_delete(supa_store, fake_supabase):
    await supa_store.put(ORDERS, "o-1", {"status": "new", "customer_id": "cust-1"})
    doc = await supa_store.get(ORDERS, "o-1")
    assert doc == {"status": "new", "customer_id": "cust-1", "id": "o-1"}

    patched = await supa_store.patch(ORDERS, "o-1", {"status": "confirmed"})
    assert patched["status"] == "confirmed"

    await supa_store.delete(ORDERS, "o-1")
    assert await supa_store.get(ORDERS, "o-1") is None
    assert fake_supabase.client.table(ORDERS).rows == []


@pytest.mark.asyncio
async def test_patch_missing_row_is_not_found(supa_store):
    with pytest.raises(NotFound):
        await supa_store.patch(ORDERS, "ghost", {"status": "confirmed"})


@pytest.mark.asyncio
async def test_query_translates_filters(supa_store, fake_supabase):
    await supa_store.query(
        ORDERS,
        [eq("cook_id", "cook-1"), not_in("status", ["cancelled", "completed"]), contains("tags", "spicy")],
        order_by="created_at",
        descending=True,
        limit=5,
    )
    query = fake_supabase.client.table(ORDERS).executed[-1]
    assert query.calls == [
        ("eq", ("cook_id", "cook-1"), {}),
        ("not_", (), {}),
        ("in_", ("status", ["cancelled", "completed"]), {}),
        ("contains", ("tags", ["spicy"]), {}),
        ("order", ("created_at",), {"desc": True}),
        ("limit", (5,), {}),
    ]


@pytest.mark.asyncio
async def test_backend_failure_surfaces_as_store_unavailable(supa_store, fake_supabase):
    fake_supabase.client.table(ORDERS).fail = True
    with pytest.raises(StoreUnavailable) as exc_info:
        await supa_store.get(ORDERS, "o-1")
    assert exc_info.value.status_code == 503
    assert "connection refused" in exc_info.value.diagnostics["exception"]


@pytest.mark.asyncio
async def test_missing_client_is_store_unavailable():
    store = SupabaseDocumentStore(SimpleNamespace(client=None))
    with pytest.raises(StoreUnavailable):
        await store.query(ORDERS)
    assert store.health_check() is False


def test_wrapper_without_credentials_stays_offline():
    wrapper = SupabaseClient(Settings(supabase_url=None, supabase_service_role_key=None))
    assert wrapper.client is None
    assert wrapper.health_check() is False
    assert wrapper.diagnostics() == {"configured": False, "client_present": False, "host": None}


def test_wrapper_rejects_non_supabase_url():
    wrapper = SupabaseClient(
        Settings(supabase_url="http://localhost:54321", supabase_service_role_key="secret")
    )
    assert wrapper.client is None
    assert wrapper.diagnostics()["host"] == "localhost:54321"
