from contextlib import contextmanager
from unittest.mock import MagicMock

import pytest

from models.breeder import Breeder, Owner
from repositories.breeder_store import BreederStore
from repositories.memory_store import InMemoryBreederStore


def make_owner(**overrides) -> Owner:
    fields = dict(forename="Jane", surname="Doe", address="1 Elm St", email="jane@example.com")
    fields.update(overrides)
    return Owner(**fields)


def make_breeder(owners=None, **overrides) -> Breeder:
    fields = dict(affix="Ashworth", short_affix="ASH", website="ashworth.example")
    fields.update(overrides)
    return Breeder(owners=owners if owners is not None else [make_owner()], **fields)


@pytest.fixture
def memory_store():
    """Fresh in-memory repository."""
    return InMemoryBreederStore()


@pytest.fixture
def cursor():
    """Mock psycopg2 cursor shared by every transaction of a test."""
    cur = MagicMock()
    cur.fetchone.return_value = None
    cur.fetchall.return_value = []
    cur.rowcount = 0
    return cur


@pytest.fixture
def sql_store(cursor, monkeypatch):
    """BreederStore whose transactions run on the mock cursor."""
    @contextmanager
    def fake_transaction(ctx=None):
        if ctx is not None:
            ctx.raise_if_done()
        yield cursor

    monkeypatch.setattr("repositories.breeder_store.transaction", fake_transaction)
    return BreederStore()
