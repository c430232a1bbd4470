"""Shared fixtures: in-memory storage, audit logger and store builders."""

import pytest

from allowance_ledger.audit import AuditLogger
from allowance_ledger.ledger import LedgerStore, RecordCodec, TotalAggregator
from allowance_ledger.services.storage import InMemoryLedgerStorage
from allowance_ledger.session import LedgerSession


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def memory_storage():
    return InMemoryLedgerStorage()


@pytest.fixture
def make_store(audit_logger):
    """Build a LedgerStore over a given storage."""
    def _make(storage, **kwargs):
        kwargs.setdefault("audit_logger", audit_logger)
        kwargs.setdefault("aggregator", TotalAggregator(audit_logger=audit_logger))
        kwargs.setdefault("codec", RecordCodec())
        return LedgerStore(storage=storage, **kwargs)
    return _make


@pytest.fixture
def session(memory_storage, make_store, audit_logger):
    return LedgerSession(store=make_store(memory_storage), audit_logger=audit_logger)
