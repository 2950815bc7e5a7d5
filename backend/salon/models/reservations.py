from __future__ import annotations

from ..extensions import db
from salon.time_utils import to_utc_z
from .mixins import new_id


RESERVATION_SCHEDULED = "scheduled"
RESERVATION_IN_PROGRESS = "in_progress"
RESERVATION_COMPLETED = "completed"
RESERVATION_CANCELLED = "cancelled"

RESERVATION_STATUSES = (
    RESERVATION_SCHEDULED,
    RESERVATION_IN_PROGRESS,
    RESERVATION_COMPLETED,
    RESERVATION_CANCELLED,
)


class Reservation(db.Model):
    """
    Booked future service.

    LIFECYCLE:
    - scheduled -> in_progress (started on a seat) | cancelled
    - in_progress -> completed (manual) | scheduled (seat session cancelled)

    seat_id stays NULL until the reservation is started on a seat.
    """
    __tablename__ = "reservations"
    __table_args__ = (
        db.Index("ix_reservations_status_reserved_at", "status", "reserved_at"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    member_id = db.Column(db.String(36), nullable=True, index=True)
    member_name = db.Column(db.String(64), nullable=False)
    member_phone = db.Column(db.String(32), nullable=True)

    seat_id = db.Column(db.Integer, db.ForeignKey("seats.id"), nullable=True, index=True)

    staff_id = db.Column(db.String(36), nullable=False, index=True)
    staff_name = db.Column(db.String(64), nullable=False)

    total_price = db.Column(db.Integer, nullable=False, default=0)
    reserved_at = db.Column(db.DateTime(timezone=True), nullable=False, index=True)
    estimated_duration = db.Column(db.Integer, nullable=False)  # minutes

    status = db.Column(db.String(16), nullable=False, default=RESERVATION_SCHEDULED, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    services = db.relationship(
        "SelectedService",
        cascade="all, delete-orphan",
        order_by="SelectedService.id",
        foreign_keys="SelectedService.reservation_id",
        lazy="selectin",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "member_id": self.member_id,
            "member_name": self.member_name,
            "member_phone": self.member_phone,
            "seat_id": self.seat_id,
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
            "services": [s.to_dict() for s in self.services],
            "total_price": self.total_price,
            "reserved_at": to_utc_z(self.reserved_at),
            "estimated_duration": self.estimated_duration,
            "status": self.status,
            "created_at": to_utc_z(self.created_at),
        }
