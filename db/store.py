"""
Record store contract shared by the Supabase and local backends.
"""
from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List


def to_document(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Convert field values to JSON-friendly types (amounts as floats, dates as ISO text)."""
    document = {}
    for key, value in fields.items():
        if isinstance(value, Decimal):
            value = float(value)
        elif isinstance(value, (date, datetime)):
            value = value.isoformat()
        elif isinstance(value, Enum):
            value = value.value
        document[key] = value
    return document


class RecordKind(str, Enum):
    """Collections a user's records live in."""
    BILLS = "bills"
    INCOMES = "incomes"
    TRANSACTIONS = "transactions"
    SAVINGS = "savings"


class StoreError(RuntimeError):
    """A store read or write failed."""


class RecordStore(ABC):
    """
    Per-user document store.

    Records are plain dicts with an "id" key; dates are ISO strings.
    """

    def __init__(self, user_id: str):
        self.user_id = user_id

    @abstractmethod
    def list(self, kind: RecordKind) -> List[Dict[str, Any]]:
        """All records of a kind for this user."""

    @abstractmethod
    def create(self, kind: RecordKind, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a record and return it as stored, including its id."""

    @abstractmethod
    def update(self, kind: RecordKind, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Merge fields into a record and return it as stored."""

    @abstractmethod
    def delete(self, kind: RecordKind, record_id: str) -> None:
        """Remove a record."""
