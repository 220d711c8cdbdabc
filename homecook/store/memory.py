"""
In-memory document store.

Used by the test-suite and for local development (STORE_BACKEND=memory).
Collections keep insertion order, so ties under a sort key come back in the
order the documents were first written, like a backing store would deliver
them.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional, Sequence

from homecook.services.errors import NotFound
from homecook.store.base import Document, Filter

logger = logging.getLogger(__name__)


def _matches(doc: Document, flt: Filter) -> bool:
    value = doc.get(flt.field)
    if flt.op == "eq":
        return value == flt.value
    if flt.op == "in":
        return value in flt.value
    if flt.op == "not_in":
        return value not in flt.value
    if flt.op == "contains":
        return isinstance(value, list) and flt.value in value
    if value is None:
        return False
    if flt.op == "gt":
        return value > flt.value
    if flt.op == "gte":
        return value >= flt.value
    return False


class InMemoryDocumentStore:

    def __init__(self) -> None:
        self._collections: Dict[str, Dict[str, Document]] = {}

    def _collection(self, name: str) -> Dict[str, Document]:
        return self._collections.setdefault(name, {})

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        doc = self._collection(collection).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def put(self, collection: str, doc_id: str, fields: Document) -> Document:
        doc = copy.deepcopy(fields)
        doc["id"] = doc_id
        self._collection(collection)[doc_id] = doc
        logger.debug("put %s/%s", collection, doc_id)
        return copy.deepcopy(doc)

    async def patch(self, collection: str, doc_id: str, fields: Document) -> Document:
        docs = self._collection(collection)
        if doc_id not in docs:
            raise NotFound(f"{collection}/{doc_id} not found")
        docs[doc_id].update(copy.deepcopy(fields))
        logger.debug("patch %s/%s fields=%s", collection, doc_id, sorted(fields))
        return copy.deepcopy(docs[doc_id])

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        rows = [
            d
            for d in self._collection(collection).values()
            if all(_matches(d, f) for f in filters)
        ]
        if order_by:
            present = [d for d in rows if d.get(order_by) is not None]
            missing = [d for d in rows if d.get(order_by) is None]
            present.sort(key=lambda d: d[order_by], reverse=descending)
            rows = present + missing
        if limit is not None:
            rows = rows[:limit]
        return [copy.deepcopy(d) for d in rows]

    async def delete(self, collection: str, doc_id: str) -> None:
        self._collection(collection).pop(doc_id, None)

    def health_check(self) -> bool:
        return True

    def dump(self, collection: str) -> List[Any]:
        """Raw view of a collection, for tests and debugging."""
        return list(self._collection(collection).values())
