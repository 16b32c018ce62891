"""
Tests for the SQLAlchemy record store.
"""
import pytest
from datetime import date
from decimal import Decimal

from db.local_store import SqlRecordStore
from db.models import Database
from db.store import RecordKind, StoreError, to_document
from budget.models import BillStatus


@pytest.fixture
def database():
    return Database("sqlite://")


@pytest.fixture
def store(database):
    return SqlRecordStore(database, "user-1")


def test_to_document_converts_values():
    """Test that amounts, dates and enums become JSON-friendly."""
    document = to_document({
        "amount": Decimal("12.50"),
        "start_date": date(2024, 1, 8),
        "status": BillStatus.PAID,
        "description": "Rent",
    })
    assert document == {"amount": 12.5, "start_date": "2024-01-08", "status": "paid", "description": "Rent"}


def test_create_assigns_id_and_user(store):
    """Test that created records come back with a store id."""
    created = store.create(RecordKind.BILLS, {"id": "ignored", "user_id": "someone-else",
                                             "amount": Decimal("80"), "description": "Phone"})

    assert created["id"] != "ignored"
    assert created["user_id"] == "user-1"
    assert created["amount"] == 80.0

    listed = store.list(RecordKind.BILLS)
    assert [row["id"] for row in listed] == [created["id"]]


def test_list_is_scoped_by_kind_and_user(database, store):
    other = SqlRecordStore(database, "user-2")
    store.create(RecordKind.BILLS, {"amount": 1})
    store.create(RecordKind.INCOMES, {"amount": 2})
    other.create(RecordKind.BILLS, {"amount": 3})

    assert [row["amount"] for row in store.list(RecordKind.BILLS)] == [1]
    assert [row["amount"] for row in store.list("incomes")] == [2]
    assert [row["amount"] for row in other.list(RecordKind.BILLS)] == [3]
    assert store.list(RecordKind.SAVINGS) == []


def test_update_merges_fields(store):
    created = store.create(RecordKind.BILLS, {"amount": 80, "description": "Phone", "status": "unpaid"})

    updated = store.update(RecordKind.BILLS, created["id"], {"status": BillStatus.PAID,
                                                           "last_paid_date": date(2024, 1, 9)})

    assert updated["description"] == "Phone"
    assert updated["status"] == "paid"
    assert updated["last_paid_date"] == "2024-01-09"
    assert store.list(RecordKind.BILLS)[0]["status"] == "paid"


def test_delete_removes_record(store):
    keep = store.create(RecordKind.TRANSACTIONS, {"amount": 5})
    drop = store.create(RecordKind.TRANSACTIONS, {"amount": 6})

    store.delete(RecordKind.TRANSACTIONS, drop["id"])

    assert [row["id"] for row in store.list(RecordKind.TRANSACTIONS)] == [keep["id"]]


def test_missing_record_raises_store_error(store):
    """Test update and delete of unknown ids."""
    with pytest.raises(StoreError):
        store.update(RecordKind.BILLS, "does-not-exist", {"amount": 1})
    with pytest.raises(StoreError):
        store.delete(RecordKind.BILLS, "does-not-exist")


def test_other_users_records_are_not_writable(database, store):
    other = SqlRecordStore(database, "user-2")
    created = other.create(RecordKind.BILLS, {"amount": 3})

    with pytest.raises(StoreError):
        store.delete(RecordKind.BILLS, created["id"])
    assert len(other.list(RecordKind.BILLS)) == 1
