"""
Supabase backend for the record store.
"""
import logging
import os
from typing import Any, Dict, List, Optional

from dotenv import find_dotenv, load_dotenv
from supabase import create_client, Client

from .store import RecordKind, RecordStore, StoreError, to_document

logger = logging.getLogger(__name__)


class SupabaseRecordStore(RecordStore):
    """Supabase record store; one table per record kind, rows scoped by user_id."""

    def __init__(self, client: Client, user_id: str):
        super().__init__(user_id)
        self.client = client

    @classmethod
    def from_env(cls, user_id: str, url: Optional[str] = None, key: Optional[str] = None) -> "SupabaseRecordStore":
        """Build a store from SUPABASE_URL / SUPABASE_KEY unless given explicitly."""
        load_dotenv(find_dotenv(usecwd=True))
        url = url or os.getenv("SUPABASE_URL")
        key = key or os.getenv("SUPABASE_KEY")

        if not url or not key:
            raise ValueError("Supabase URL and key must be set in environment variables")

        return cls(create_client(url, key), user_id)

    def _table(self, kind: RecordKind):
        return self.client.table(RecordKind(kind).value)

    def list(self, kind: RecordKind) -> List[Dict[str, Any]]:
        try:
            response = self._table(kind).select("*").eq("user_id", self.user_id).execute()
        except Exception as e:
            raise StoreError(f"Failed to load {RecordKind(kind).value}: {e}") from e
        logger.info(f"Loaded {len(response.data)} {RecordKind(kind).value} from Supabase")
        return response.data

    def create(self, kind: RecordKind, fields: Dict[str, Any]) -> Dict[str, Any]:
        data = to_document(fields)
        data.pop("id", None)
        data["user_id"] = self.user_id
        try:
            response = self._table(kind).insert(data).execute()
        except Exception as e:
            raise StoreError(f"Failed to create {RecordKind(kind).value} record: {e}") from e
        if not response.data:
            raise StoreError(f"Supabase returned no row for new {RecordKind(kind).value} record")
        return response.data[0]

    def update(self, kind: RecordKind, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        data = to_document(fields)
        data.pop("id", None)
        data.pop("user_id", None)
        try:
            response = (
                self._table(kind).update(data)
                .eq("id", record_id).eq("user_id", self.user_id)
                .execute()
            )
        except Exception as e:
            raise StoreError(f"Failed to update {RecordKind(kind).value} record {record_id}: {e}") from e
        if not response.data:
            raise StoreError(f"No {RecordKind(kind).value} record with id {record_id}")
        return response.data[0]

    def delete(self, kind: RecordKind, record_id: str) -> None:
        try:
            self._table(kind).delete().eq("id", record_id).eq("user_id", self.user_id).execute()
        except Exception as e:
            raise StoreError(f"Failed to delete {RecordKind(kind).value} record {record_id}: {e}") from e

    def test_connection(self) -> bool:
        """Test the Supabase connection."""
        try:
            self._table(RecordKind.BILLS).select("id").limit(1).execute()
            return True
        except Exception as e:
            logger.warning(f"Supabase connection test failed: {e}")
            return False
