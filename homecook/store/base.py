"""
Document store contract consumed by every service.

Services receive a store instance explicitly; they never reach for a global
backend client. Documents are plain JSON-compatible dicts keyed by an `id`
field. Queries are a conjunction of `Filter`s, an optional single sort key,
and an optional limit.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

Document = Dict[str, Any]

ORDERS = "orders"
MEALS = "meals"
COOK_PROFILES = "cook_profiles"
REVIEWS = "reviews"

FILTER_OPS = ("eq", "in", "not_in", "gt", "gte", "contains")


@dataclass(frozen=True)
class Filter:
    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in FILTER_OPS:
            raise ValueError(f"unsupported filter op {self.op!r}")


def eq(field: str, value: Any) -> Filter:
    return Filter(field, "eq", value)


def in_(field: str, values: Sequence[Any]) -> Filter:
    return Filter(field, "in", list(values))


def not_in(field: str, values: Sequence[Any]) -> Filter:
    return Filter(field, "not_in", list(values))


def gt(field: str, value: Any) -> Filter:
    return Filter(field, "gt", value)


def gte(field: str, value: Any) -> Filter:
    return Filter(field, "gte", value)


def contains(field: str, value: Any) -> Filter:
    """Array field contains `value`."""
    return Filter(field, "contains", value)


class DocumentStore(Protocol):
    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        ...

    async def put(self, collection: str, doc_id: str, fields: Document) -> Document:
        """Create or fully replace a document."""
        ...

    async def patch(self, collection: str, doc_id: str, fields: Document) -> Document:
        """Update only `fields`; raises NotFound if the document is missing."""
        ...

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        ...

    async def delete(self, collection: str, doc_id: str) -> None:
        ...

    def health_check(self) -> bool:
        ...
