# Overview: Service-layer storage backend on top of the storage_records table.

"""
SQL storage backend

Replaces browser storage with a key/value table. Read and write failures are
transient: they are logged, the session is rolled back, and callers fall
back to defaults instead of failing the request.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import StorageRecord
from ..state.persistence import StorageBackend


logger = logging.getLogger(__name__)


class SqlStorageBackend(StorageBackend):
    def get(self, key: str) -> str | None:
        try:
            record = db.session.query(StorageRecord).filter_by(key=key).first()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to read storage record %r", key)
            return None
        return record.value if record else None

    def set(self, key: str, value: str) -> None:
        try:
            record = db.session.query(StorageRecord).filter_by(key=key).first()
            if record is None:
                record = StorageRecord(key=key, value=value)
                db.session.add(record)
            else:
                record.value = value
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to write storage record %r", key)

    def delete(self, key: str) -> None:
        try:
            db.session.query(StorageRecord).filter_by(key=key).delete()
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to delete storage record %r", key)


def list_records() -> list[dict]:
    return [r.to_dict() for r in db.session.query(StorageRecord).order_by(StorageRecord.key.asc()).all()]
