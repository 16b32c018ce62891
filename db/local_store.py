"""
SQLAlchemy backend for the record store.
"""
import logging
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError

from .models import Database, Record
from .store import RecordKind, RecordStore, StoreError, to_document

logger = logging.getLogger(__name__)


class SqlRecordStore(RecordStore):
    """Record store kept in a local SQL database, one JSON document per record."""

    def __init__(self, database: Database, user_id: str):
        super().__init__(user_id)
        self.database = database
        self.database.init_db()

    def _get(self, session, kind: RecordKind, record_id: str) -> Record:
        record = (
            session.query(Record)
            .filter_by(id=record_id, user_id=self.user_id, kind=RecordKind(kind).value)
            .one_or_none()
        )
        if record is None:
            raise StoreError(f"No {RecordKind(kind).value} record with id {record_id}")
        return record

    def list(self, kind: RecordKind) -> List[Dict[str, Any]]:
        session = self.database.get_session()
        try:
            records = (
                session.query(Record)
                .filter_by(user_id=self.user_id, kind=RecordKind(kind).value)
                .order_by(Record.created_at, Record.id)
                .all()
            )
            return [record.to_dict() for record in records]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load {RecordKind(kind).value}: {e}") from e
        finally:
            session.close()

    def create(self, kind: RecordKind, fields: Dict[str, Any]) -> Dict[str, Any]:
        data = to_document(fields)
        data.pop("id", None)
        data.pop("user_id", None)

        session = self.database.get_session()
        try:
            record = Record(user_id=self.user_id, kind=RecordKind(kind).value, data=data)
            session.add(record)
            session.commit()
            return record.to_dict()
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError(f"Failed to create {RecordKind(kind).value} record: {e}") from e
        finally:
            session.close()

    def update(self, kind: RecordKind, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        changes = to_document(fields)
        changes.pop("id", None)
        changes.pop("user_id", None)

        session = self.database.get_session()
        try:
            record = self._get(session, kind, record_id)
            record.data = {**record.data, **changes}
            session.commit()
            return record.to_dict()
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError(f"Failed to update {RecordKind(kind).value} record {record_id}: {e}") from e
        finally:
            session.close()

    def delete(self, kind: RecordKind, record_id: str) -> None:
        session = self.database.get_session()
        try:
            session.delete(self._get(session, kind, record_id))
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError(f"Failed to delete {RecordKind(kind).value} record {record_id}: {e}") from e
        finally:
            session.close()
