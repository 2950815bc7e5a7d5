from __future__ import annotations

from ..extensions import db
from salon.time_utils import to_utc_z
from .mixins import new_id


SEAT_AVAILABLE = "available"
SEAT_IN_USE = "in_use"
# Declared for clients; no operation moves a seat into or out of it.
SEAT_RESERVED = "reserved"

SEAT_STATUSES = (SEAT_AVAILABLE, SEAT_IN_USE, SEAT_RESERVED)


class Seat(db.Model):
    """
    Physical styling chair.

    INVARIANT: current_session is present if and only if status == in_use.
    Seats are never deleted, so ledger entries can always resolve them.
    """
    __tablename__ = "seats"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    status = db.Column(db.String(16), nullable=False, default=SEAT_AVAILABLE, index=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    current_session = db.relationship(
        "ServiceSession",
        uselist=False,
        back_populates="seat",
        cascade="all, delete-orphan",
    )
    __mapper_args__ = {"version_id_col": version_id}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "current_session": self.current_session.to_dict() if self.current_session else None,
            "updated_at": to_utc_z(self.updated_at),
        }


class ServiceSession(db.Model):
    """
    Service in progress on a seat.

    LIFECYCLE: created by start, converted into a LedgerEntry by complete,
    discarded by cancel. total_price is fixed at start.
    """
    __tablename__ = "service_sessions"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    seat_id = db.Column(db.Integer, db.ForeignKey("seats.id"), nullable=False, unique=True, index=True)

    member_id = db.Column(db.String(36), nullable=True, index=True)
    member_name = db.Column(db.String(64), nullable=False)

    staff_id = db.Column(db.String(36), nullable=False, index=True)
    staff_name = db.Column(db.String(64), nullable=False)

    total_price = db.Column(db.Integer, nullable=False, default=0)
    start_time = db.Column(db.DateTime(timezone=True), nullable=False)

    reservation_id = db.Column(db.String(36), db.ForeignKey("reservations.id"), nullable=True, index=True)

    seat = db.relationship("Seat", back_populates="current_session")
    services = db.relationship(
        "SelectedService",
        cascade="all, delete-orphan",
        order_by="SelectedService.id",
        foreign_keys="SelectedService.session_id",
        lazy="selectin",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "seat_id": self.seat_id,
            "member_id": self.member_id,
            "member_name": self.member_name,
            "services": [s.to_dict() for s in self.services],
            "total_price": self.total_price,
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
            "start_time": to_utc_z(self.start_time),
            "reservation_id": self.reservation_id,
        }
