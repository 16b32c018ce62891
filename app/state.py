"""
Client-side finance state with store reconciliation.

A FinanceState is created once per session and handed to the views; the
budget calculations only ever see the plain lists it holds.
"""
import logging
import uuid
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from budget.models import Bill, BillStatus, Income, SavingsGoal, Transaction
from db.local_store import SqlRecordStore
from db.models import Database
from db.store import RecordKind, RecordStore, StoreError
from db.supabase_client import SupabaseRecordStore
from .config import Settings

logger = logging.getLogger(__name__)

MODELS = {
    RecordKind.BILLS: Bill,
    RecordKind.INCOMES: Income,
    RecordKind.TRANSACTIONS: Transaction,
    RecordKind.SAVINGS: SavingsGoal,
}

PENDING_PREFIX = "pending-"


def create_store(settings: Settings) -> RecordStore:
    """Supabase when configured, the local database otherwise."""
    if settings.supabase_enabled:
        return SupabaseRecordStore.from_env(
            settings.user_id, url=settings.supabase_url, key=settings.supabase_key
        )
    logger.info(f"Supabase not configured; using local store at {settings.database_url}")
    return SqlRecordStore(Database(settings.database_url), settings.user_id)


class FinanceState:
    """Holds a user's incomes, bills, transactions and savings goals."""

    def __init__(self, store: RecordStore):
        self.store = store
        self.records: Dict[RecordKind, List[Any]] = {kind: [] for kind in RecordKind}
        self.loaded = False

    @property
    def bills(self) -> List[Bill]:
        return self.records[RecordKind.BILLS]

    @property
    def incomes(self) -> List[Income]:
        return self.records[RecordKind.INCOMES]

    @property
    def transactions(self) -> List[Transaction]:
        return self.records[RecordKind.TRANSACTIONS]

    @property
    def savings(self) -> List[SavingsGoal]:
        return self.records[RecordKind.SAVINGS]

    def _parse(self, kind: RecordKind, rows: List[Dict[str, Any]]) -> List[Any]:
        model = MODELS[kind]
        parsed = []
        for row in rows:
            try:
                parsed.append(model(**row))
            except ValidationError as e:
                logger.warning(f"Skipping invalid {kind.value} record {row.get('id')}: {e}")
        return parsed

    def load_initial_data(self, force: bool = False) -> None:
        """Load every kind of record unless already loaded."""
        if self.loaded and not force:
            return
        for kind in RecordKind:
            self.refetch(kind)
        self.loaded = True

    def refetch(self, kind: RecordKind) -> None:
        """Replace the local records of one kind with the store's."""
        kind = RecordKind(kind)
        self.records[kind] = self._parse(kind, self.store.list(kind))

    def snapshot(self) -> Dict[RecordKind, List[Any]]:
        """Copies of the current lists for a calculation pass."""
        return {kind: [item.model_copy() for item in items] for kind, items in self.records.items()}

    def _reconcile(self, kind: RecordKind, apply_local, write_remote, settle=None):
        """
        Apply a change locally, write it to the store, then take the store's
        records as truth. The local change is rolled back if the write fails.

        If the write succeeds but the refetch does not, settle(result) puts
        the stored record in place of the optimistic one.
        """
        previous = list(self.records[kind])
        apply_local()
        try:
            result = write_remote()
        except StoreError:
            self.records[kind] = previous
            logger.error(f"Store write for {kind.value} failed; local change rolled back")
            raise
        try:
            self.refetch(kind)
        except StoreError as e:
            logger.warning(f"Reloading {kind.value} after a write failed; keeping the stored record: {e}")
            if settle is not None:
                settle(result)
        return result

    def _replace(self, kind: RecordKind, record_id: str, stored: Any) -> None:
        self.records[kind] = [stored if item.id == record_id else item for item in self.records[kind]]

    def add(self, kind: RecordKind, fields: Dict[str, Any]) -> Any:
        """Add a record; returns the stored version."""
        kind = RecordKind(kind)
        model = MODELS[kind]
        pending = model(**{**fields, "id": f"{PENDING_PREFIX}{uuid.uuid4()}"})

        def apply_local():
            self.records[kind] = [pending] + self.records[kind]

        def write_remote():
            return self.store.create(kind, pending.model_dump(exclude={"id"}))

        def settle(result):
            self._replace(kind, pending.id, model(**result))

        return model(**self._reconcile(kind, apply_local, write_remote, settle))

    def update(self, kind: RecordKind, record_id: str, fields: Dict[str, Any]) -> Any:
        """Update a record; returns the stored version."""
        kind = RecordKind(kind)
        model = MODELS[kind]

        def apply_local():
            self.records[kind] = [
                model(**{**item.model_dump(), **fields}) if item.id == record_id else item
                for item in self.records[kind]
            ]

        def write_remote():
            return self.store.update(kind, record_id, fields)

        def settle(result):
            self._replace(kind, record_id, model(**result))

        return model(**self._reconcile(kind, apply_local, write_remote, settle))

    def remove(self, kind: RecordKind, record_id: str) -> None:
        kind = RecordKind(kind)

        def apply_local():
            self.records[kind] = [item for item in self.records[kind] if item.id != record_id]

        def write_remote():
            return self.store.delete(kind, record_id)

        self._reconcile(kind, apply_local, write_remote)

    def mark_bill_paid(self, bill_id: str, paid_on: Optional[date] = None) -> Bill:
        """Mark a bill as paid, defaulting the payment date to today."""
        if paid_on is None:
            paid_on = date.today()
        return self.update(
            RecordKind.BILLS,
            bill_id,
            {"status": BillStatus.PAID.value, "last_paid_date": paid_on.isoformat()}
        )
