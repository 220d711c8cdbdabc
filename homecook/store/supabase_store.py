# homecook/store/supabase_store.py
"""
Document store backed by Supabase (PostgREST tables via supabase-py).

- Every collection maps to a table with a text `id` primary key.
- The supabase SDK is blocking, so every call runs in a worker thread via
  asyncio.to_thread to keep the event loop responsive.
- SDK responses are parsed defensively (object with .data, or dict).
- Failures surface as StoreUnavailable; nothing is retried here.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from homecook.services.errors import NotFound, StoreUnavailable
from homecook.store.base import Document, Filter

logger = logging.getLogger(__name__)


def _parse_supabase_response(resp: Any) -> Dict[str, Any]:
    """
    Turn Supabase SDK responses (object with .data or dict) into a predictable dict.
    Returns {ok, data, status_code, raw}
    """
    if resp is None:
        return {"ok": False, "data": None, "status_code": None, "raw": None}

    if hasattr(resp, "data"):
        data = getattr(resp, "data")
        status_code = getattr(resp, "status_code", None)
        ok = not (isinstance(status_code, int) and status_code >= 400)
        return {"ok": ok, "data": data, "status_code": status_code, "raw": resp}

    if isinstance(resp, dict):
        data = resp.get("data", resp.get("result", resp.get("records", None)))
        status_code = resp.get(
            "status_code", resp.get("statusCode", resp.get("status", None))
        )
        ok = not (isinstance(status_code, int) and status_code >= 400)
        return {"ok": ok, "data": data, "status_code": status_code, "raw": resp}

    return {"ok": False, "data": None, "status_code": None, "raw": str(resp)}


async def _run_blocking(fn: Callable, *args, **kwargs) -> Any:
    return await asyncio.to_thread(lambda: fn(*args, **kwargs))


def _apply_filter(qb: Any, flt: Filter) -> Any:
    if flt.op == "eq":
        return qb.eq(flt.field, flt.value)
    if flt.op == "in":
        return qb.in_(flt.field, flt.value)
    if flt.op == "not_in":
        return qb.not_.in_(flt.field, flt.value)
    if flt.op == "gt":
        return qb.gt(flt.field, flt.value)
    if flt.op == "gte":
        return qb.gte(flt.field, flt.value)
    if flt.op == "contains":
        return qb.contains(flt.field, [flt.value])
    raise ValueError(f"unsupported filter op {flt.op!r}")


class SupabaseDocumentStore:

    def __init__(self, wrapper: Any):
        # `wrapper` is homecook.config.supabase.SupabaseClient (or anything exposing `.client`)
        self.wrapper = wrapper

    @property
    def client(self) -> Any:
        client = getattr(self.wrapper, "client", None)
        if client is None:
            raise StoreUnavailable(
                "Supabase client is not initialized",
                {"hint": "set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY"},
            )
        return client

    async def _call(self, op: str, collection: str, fn: Callable) -> List[Document]:
        try:
            raw = await _run_blocking(fn)
        except StoreUnavailable:
            raise
        except Exception as exc:
            logger.exception("Supabase %s on %s failed: %s", op, collection, exc)
            raise StoreUnavailable(
                f"{op} on {collection} failed", {"exception": str(exc)}
            ) from exc
        parsed = _parse_supabase_response(raw)
        if not parsed["ok"]:
            logger.warning(
                "Supabase %s on %s returned status=%s", op, collection, parsed["status_code"]
            )
            raise StoreUnavailable(
                f"{op} on {collection} failed",
                {"status_code": parsed["status_code"], "raw_preview": str(parsed["raw"])[:300]},
            )
        data = parsed["data"]
        if data is None:
            return []
        return data if isinstance(data, list) else [data]

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        def _fn():
            return (
                self.client.table(collection).select("*").eq("id", doc_id).limit(1).execute()
            )

        rows = await self._call("get", collection, _fn)
        return rows[0] if rows else None

    async def put(self, collection: str, doc_id: str, fields: Document) -> Document:
        payload = dict(fields, id=doc_id)

        def _fn():
            return self.client.table(collection).upsert(payload).execute()

        rows = await self._call("put", collection, _fn)
        return rows[0] if rows else payload

    async def patch(self, collection: str, doc_id: str, fields: Document) -> Document:
        def _fn():
            return self.client.table(collection).update(fields).eq("id", doc_id).execute()

        rows = await self._call("patch", collection, _fn)
        if not rows:
            raise NotFound(f"{collection}/{doc_id} not found")
        return rows[0]

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        def _fn():
            qb = self.client.table(collection).select("*")
            for flt in filters:
                qb = _apply_filter(qb, flt)
            if order_by:
                qb = qb.order(order_by, desc=descending)
            if limit is not None:
                qb = qb.limit(limit)
            return qb.execute()

        return await self._call("query", collection, _fn)

    async def delete(self, collection: str, doc_id: str) -> None:
        def _fn():
            return self.client.table(collection).delete().eq("id", doc_id).execute()

        await self._call("delete", collection, _fn)

    def health_check(self) -> bool:
        check = getattr(self.wrapper, "health_check", None)
        return bool(check()) if callable(check) else False
