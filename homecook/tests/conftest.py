# homecook/tests/conftest.py
from types import SimpleNamespace

import pytest

from homecook.models.common import Actor, Role
from homecook.store.memory import InMemoryDocumentStore
from homecook.tests.factories import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def cook():
    return Actor(uid="cook-1", role=Role.COOK, display_name="Chef Ana")


@pytest.fixture
def other_cook():
    return Actor(uid="cook-2", role=Role.COOK, display_name="Chef Bo")


@pytest.fixture
def customer():
    return Actor(uid="cust-1", role=Role.CUSTOMER, display_name="Carla")


@pytest.fixture
def other_customer():
    return Actor(uid="cust-2", role=Role.CUSTOMER, display_name="Dev")


# --- Fake Supabase client (chainable query builder) ---
class FakeResponse(SimpleNamespace):
    pass


class FakeQuery:
    """Records the PostgREST-style chain and answers from the owning table's rows."""

    def __init__(self, table, action, payload=None):
        self.table = table
        self.action = action
        self.payload = payload
        self.calls = []

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._record("select", *args, **kwargs)

    def eq(self, field, value):
        return self._record("eq", field, value)

    def in_(self, field, values):
        return self._record("in_", field, values)

    @property
    def not_(self):
        self.calls.append(("not_", (), {}))
        return self

    def gt(self, field, value):
        return self._record("gt", field, value)

    def gte(self, field, value):
        return self._record("gte", field, value)

    def contains(self, field, value):
        return self._record("contains", field, value)

    def order(self, field, desc=False):
        return self._record("order", field, desc=desc)

    def limit(self, n):
        return self._record("limit", n)

    def execute(self):
        self.table.executed.append(self)
        if self.table.fail:
            raise RuntimeError("connection refused")
        if self.action in ("insert", "upsert"):
            rows = self.payload if isinstance(self.payload, list) else [self.payload]
            self.table.rows.extend(rows)
            return FakeResponse(data=rows, status_code=201)
        if self.action == "update":
            matched = [r for r in self.table.rows if self._eq_match(r)]
            for r in matched:
                r.update(self.payload)
            return FakeResponse(data=matched, status_code=200)
        if self.action == "delete":
            self.table.rows = [r for r in self.table.rows if not self._eq_match(r)]
            return FakeResponse(data=[], status_code=200)
        return FakeResponse(data=[r for r in self.table.rows if self._eq_match(r)], status_code=200)

    def _eq_match(self, row):
        return all(row.get(args[0]) == args[1] for name, args, _ in self.calls if name == "eq")


class FakeTable:

    def __init__(self):
        self.rows = []
        self.executed = []
        self.fail = False

    def select(self, *args, **kwargs):
        return FakeQuery(self, "select")

    def insert(self, rows):
        return FakeQuery(self, "insert", rows)

    def upsert(self, rows, on_conflict=None):
        return FakeQuery(self, "upsert", rows)

    def update(self, data):
        return FakeQuery(self, "update", data)

    def delete(self):
        return FakeQuery(self, "delete")


class FakeClient:

    def __init__(self):
        self._tables = {}

    def table(self, name):
        if name not in self._tables:
            self._tables[name] = FakeTable()
        return self._tables[name]


@pytest.fixture
def fake_supabase():
    return SimpleNamespace(client=FakeClient(), health_check=lambda: True)
