from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z


class StorageRecord(db.Model):
    """
    Durable key/value record.

    Holds the obfuscated state blob under a single fixed key and the
    per-user preference overlays under `userPrefs_<userId>`.
    """
    __tablename__ = "storage_records"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(255), nullable=False, unique=True, index=True)
    value = db.Column(db.Text, nullable=False, default="")

    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "key": self.key,
            "size": len(self.value or ""),
            "updated_at": to_utc_z(self.updated_at),
        }
