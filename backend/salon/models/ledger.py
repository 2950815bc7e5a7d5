from __future__ import annotations

from ..extensions import db
from salon.time_utils import to_utc_z
from .mixins import new_id


class LedgerEntry(db.Model):
    """
    Revenue record of one completed seat session.

    IMMUTABLE: Entries are appended exactly once per completion and never
    updated or deleted. Member, staff and reservation ids are kept as plain
    values (no FK) so removing those records never touches revenue history.
    """
    __tablename__ = "ledger_entries"
    __table_args__ = (
        db.Index("ix_ledger_entries_staff_completed", "staff_id", "completed_at"),
        db.Index("ix_ledger_entries_seat_completed", "seat_id", "completed_at"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    reservation_id = db.Column(db.String(36), nullable=True, index=True)
    member_id = db.Column(db.String(36), nullable=True, index=True)
    member_name = db.Column(db.String(64), nullable=False)

    seat_id = db.Column(db.Integer, db.ForeignKey("seats.id"), nullable=False)

    staff_id = db.Column(db.String(36), nullable=False)
    staff_name = db.Column(db.String(64), nullable=False)

    total_price = db.Column(db.Integer, nullable=False, default=0)

    # completed_at is business time; created_at is system time (DB default)
    completed_at = db.Column(db.DateTime(timezone=True), nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    services = db.relationship(
        "SelectedService",
        order_by="SelectedService.id",
        foreign_keys="SelectedService.ledger_entry_id",
        lazy="selectin",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "reservation_id": self.reservation_id,
            "member_id": self.member_id,
            "member_name": self.member_name,
            "seat_id": self.seat_id,
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
            "services": [s.to_dict() for s in self.services],
            "total_price": self.total_price,
            "completed_at": to_utc_z(self.completed_at),
            "created_at": to_utc_z(self.created_at),
        }
