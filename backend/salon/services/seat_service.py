"""
Seat / Session Engine

WHY: Each styling chair holds at most one service in progress. The engine
is the only writer of seat status and sessions.

DESIGN PRINCIPLES:
- available --start--> in_use --complete--> available
- in_use --cancel--> available
- current_session present <=> status == in_use
- A rejected operation leaves every record unchanged
- complete is one transaction: ledger entry + member stamp + seat release
- "reserved" is a declared status only; nothing here enters or leaves it
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from flask import current_app

from ..extensions import db
from ..models import LedgerEntry, Member, Reservation, Seat, SelectedService, ServiceSession
from ..models.seats import SEAT_AVAILABLE, SEAT_IN_USE
from ..time_utils import utcnow
from ..validation import InvalidStateError, NotFoundError, ValidationError
from . import ledger_service, member_service, reservation_service
from .ticket_service import build_ticket

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    """What the front desk needs after a completion."""
    entry: LedgerEntry
    member_id: str | None
    stamps: int | None  # new stamp count, None for guests
    benefit_eligible: bool

    def to_dict(self) -> dict:
        return {
            "ledger": self.entry.to_dict(),
            "member_id": self.member_id,
            "stamps": self.stamps,
            "benefit_eligible": self.benefit_eligible,
        }


# =============================================================================
# SEAT MANAGEMENT
# =============================================================================

def list_seats() -> list[Seat]:
    return db.session.query(Seat).order_by(Seat.id.asc()).all()


def get_seat(seat_id: int) -> Seat:
    seat = db.session.get(Seat, seat_id)
    if seat is None:
        raise NotFoundError(f"Seat {seat_id} not found")
    return seat


def _lock_seat(seat_id: int) -> Seat:
    # SQLite ignores FOR UPDATE; other databases serialise per seat.
    seat = db.session.query(Seat).filter(Seat.id == seat_id).with_for_update().first()
    if seat is None:
        raise NotFoundError(f"Seat {seat_id} not found")
    return seat


def create_seat(name: str) -> Seat:
    name = (name or "").strip()
    if not name:
        raise ValidationError("name is required")
    seat = Seat(name=name, status=SEAT_AVAILABLE)
    db.session.add(seat)
    db.session.commit()
    return seat


def rename_seat(seat_id: int, name: str) -> Seat:
    name = (name or "").strip()
    if not name:
        raise ValidationError("name is required")
    seat = get_seat(seat_id)
    seat.name = name
    db.session.commit()
    return seat


# =============================================================================
# SESSION LIFECYCLE
# =============================================================================

def start_service(
    seat_id: int,
    *,
    staff_id: str | None,
    staff_name: str | None = None,
    member_id: str | None = None,
    member_name: str | None = None,
    services=None,
    selections=None,
    total_price=None,
    reservation_id: str | None = None,
) -> Seat:
    """
    Start a service on an available seat.

    Raises:
        NotFoundError: seat, staff, member or reservation missing
        InvalidStateError: seat not available, or reservation not scheduled
        ValidationError: no staff, no services, guest without a name,
            total_price not equal to the sum of service prices
    """
    seat = _lock_seat(seat_id)
    if seat.status != SEAT_AVAILABLE or seat.current_session is not None:
        raise InvalidStateError(f"Seat {seat.id} is already in use")

    reservation = None
    if reservation_id:
        reservation = db.session.get(Reservation, reservation_id)
        if reservation is None:
            raise NotFoundError(f"Reservation {reservation_id} not found")

    ticket = build_ticket(
        staff_id=staff_id,
        staff_name=staff_name,
        member_id=member_id,
        member_name=member_name,
        services=services,
        selections=selections,
        total_price=total_price,
    )

    try:
        if reservation is not None:
            reservation_service.mark_in_progress(reservation, seat.id)

        session = ServiceSession(
            seat_id=seat.id,
            member_id=ticket.member_id,
            member_name=ticket.member_name,
            staff_id=ticket.staff_id,
            staff_name=ticket.staff_name,
            total_price=ticket.total_price,
            start_time=utcnow(),
            reservation_id=reservation.id if reservation is not None else None,
        )
        session.services = [SelectedService(**line) for line in ticket.services]
        seat.current_session = session
        seat.status = SEAT_IN_USE
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "seat %s started session=%s staff=%s total=%s",
        seat.id, session.id, session.staff_id, session.total_price,
    )
    return seat


def start_reservation(reservation_id: str, seat_id: int) -> Seat:
    """Promote a scheduled reservation into a session on the given seat."""
    reservation = reservation_service.get_reservation(reservation_id)
    return start_service(
        seat_id,
        staff_id=reservation.staff_id,
        staff_name=reservation.staff_name,
        member_id=reservation.member_id,
        member_name=reservation.member_name,
        services=[line.copy_values() for line in reservation.services],
        total_price=reservation.total_price,
        reservation_id=reservation.id,
    )


def _require_active_session(seat: Seat) -> ServiceSession:
    session = seat.current_session
    if seat.status != SEAT_IN_USE or session is None:
        raise InvalidStateError(f"Seat {seat.id} has no active session")
    return session


def complete_service(seat_id: int) -> CompletionResult:
    """
    Finish the session on a seat.

    One transaction:
    - append a ledger entry copied from the session (completed_at = now)
    - +1 stamp for the member, if the session has one
    - drop the session and release the seat
    - optionally close the linked reservation (COMPLETE_LINKED_RESERVATION)

    Any failure rolls the whole unit back.
    """
    seat = _lock_seat(seat_id)
    session = _require_active_session(seat)
    session_id = session.id

    try:
        entry = ledger_service.append_entry(
            session=session,
            seat_id=seat.id,
            completed_at=utcnow(),
        )

        stamps = None
        eligible = False
        if session.member_id:
            member = db.session.get(Member, session.member_id)
            # A member deleted mid-service keeps the ledger snapshot only.
            if member is not None:
                stamps = member_service.credit_stamp(member)
                eligible = member_service.is_benefit_eligible(member)

        if session.reservation_id and current_app.config.get("COMPLETE_LINKED_RESERVATION", False):
            reservation = db.session.get(Reservation, session.reservation_id)
            if reservation is not None:
                reservation_service.mark_completed(reservation)

        seat.current_session = None
        seat.status = SEAT_AVAILABLE
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "seat %s completed session=%s ledger=%s total=%s stamps=%s",
        seat.id, session_id, entry.id, entry.total_price, stamps,
    )
    return CompletionResult(
        entry=entry,
        member_id=entry.member_id,
        stamps=stamps,
        benefit_eligible=eligible,
    )


def cancel_service(seat_id: int) -> Seat:
    """
    Abandon the session on a seat.

    No ledger entry, no stamp. A linked reservation goes back to scheduled.
    """
    seat = _lock_seat(seat_id)
    session = _require_active_session(seat)
    session_id = session.id

    try:
        if session.reservation_id:
            reservation = db.session.get(Reservation, session.reservation_id)
            if reservation is not None:
                reservation_service.return_to_scheduled(reservation)

        seat.current_session = None
        seat.status = SEAT_AVAILABLE
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info("seat %s cancelled session=%s", seat.id, session_id)
    return seat
