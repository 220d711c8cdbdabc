"""Document store contract and its backends."""
from homecook.store.base import (
    COOK_PROFILES,
    MEALS,
    ORDERS,
    REVIEWS,
    Document,
    DocumentStore,
    Filter,
)
from homecook.store.memory import InMemoryDocumentStore
from homecook.store.supabase_store import SupabaseDocumentStore

__all__ = [
    "COOK_PROFILES",
    "MEALS",
    "ORDERS",
    "REVIEWS",
    "Document",
    "DocumentStore",
    "Filter",
    "InMemoryDocumentStore",
    "SupabaseDocumentStore",
]
