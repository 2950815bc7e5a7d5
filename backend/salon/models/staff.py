from __future__ import annotations

from ..extensions import db
from salon.time_utils import to_utc_z
from .mixins import new_id


class Staff(db.Model):
    """
    Stylist / staff member.

    Sessions, reservations and ledger entries carry staff_id plus a name
    snapshot, so renaming or removing a staff member never rewrites history.
    """
    __tablename__ = "staff"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(64), nullable=False)
    position = db.Column(db.Integer, nullable=False, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": to_utc_z(self.created_at),
        }
