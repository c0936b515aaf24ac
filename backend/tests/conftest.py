"""Shared fixtures for all test modules."""
import os
import tempfile

os.environ.setdefault(
    "DATABASE_URL",
    "sqlite:///" + os.path.join(tempfile.gettempdir(), "reimbursements_test.db"),
)
os.environ.setdefault(
    "LOCK_DIR", os.path.join(tempfile.gettempdir(), "reimbursements_test_locks")
)
os.environ.setdefault("EXCHANGE_TOTAL_POLICY", "settle")

import pytest

from reimbursements.db import SessionLocal, init_db


@pytest.fixture
def db():
    """Fresh schema and session for every test."""
    init_db(reset=True)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def other_db(db):
    """A second session on the same database, as a concurrent worker would hold."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
