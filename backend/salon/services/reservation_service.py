# Overview: Service-layer operations for reservations; booking CRUD and status transitions.

"""
Reservation Store

WHY: Bookings are taken ahead of time and later promoted into a seat
session. Once promoted, the reservation is referenced by reservation_id on
the session and on the resulting ledger entry, but the records stay
independent (no cascades either way).

STATUS TRANSITIONS:
- scheduled   -> in_progress (started on a seat) | cancelled
- in_progress -> completed (operator closes it) | scheduled (seat session cancelled)
- completed, cancelled: terminal
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from flask import current_app
from sqlalchemy import or_

from ..extensions import db
from ..models import Reservation, SelectedService
from ..models.reservations import (
    RESERVATION_CANCELLED,
    RESERVATION_COMPLETED,
    RESERVATION_IN_PROGRESS,
    RESERVATION_SCHEDULED,
    RESERVATION_STATUSES,
)
from ..time_utils import local_day_bounds, local_today, parse_iso_datetime
from ..validation import InvalidStateError, NotFoundError, ValidationError
from .ticket_service import build_ticket

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    RESERVATION_SCHEDULED: {RESERVATION_IN_PROGRESS, RESERVATION_CANCELLED},
    RESERVATION_IN_PROGRESS: {RESERVATION_COMPLETED, RESERVATION_SCHEDULED},
    RESERVATION_COMPLETED: set(),
    RESERVATION_CANCELLED: set(),
}


def _salon_tz() -> ZoneInfo:
    return ZoneInfo(current_app.config.get("SALON_TIMEZONE", "UTC"))


def _parse_reserved_at(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValidationError("reserved_at is required")
    try:
        dt = parse_iso_datetime(value)
    except ValueError:
        raise ValidationError("reserved_at must be an ISO-8601 datetime")
    if dt is None:
        raise ValidationError("reserved_at is required")
    return dt


def _parse_duration(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError("estimated_duration must be a positive number of minutes")
    return value


def _replace_services(reservation: Reservation, lines: list[dict]) -> None:
    reservation.services = [SelectedService(**line) for line in lines]


def get_reservation(reservation_id: str) -> Reservation:
    reservation = db.session.get(Reservation, reservation_id)
    if reservation is None:
        raise NotFoundError(f"Reservation {reservation_id} not found")
    return reservation


def create_reservation(data: dict) -> Reservation:
    """
    Book a future service.

    Request shape mirrors a seat start plus reserved_at / estimated_duration.
    Services may be sent as priced values ("services") or as menu
    selections ("selections").
    """
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON payload")

    ticket = build_ticket(
        staff_id=data.get("staff_id"),
        staff_name=data.get("staff_name"),
        member_id=data.get("member_id"),
        member_name=data.get("member_name"),
        member_phone=data.get("member_phone"),
        services=data.get("services"),
        selections=data.get("selections"),
        total_price=data.get("total_price"),
    )
    reserved_at = _parse_reserved_at(data.get("reserved_at"))
    duration = _parse_duration(data.get("estimated_duration"))

    reservation = Reservation(
        member_id=ticket.member_id,
        member_name=ticket.member_name,
        member_phone=ticket.member_phone,
        staff_id=ticket.staff_id,
        staff_name=ticket.staff_name,
        total_price=ticket.total_price,
        reserved_at=reserved_at,
        estimated_duration=duration,
        status=RESERVATION_SCHEDULED,
    )
    _replace_services(reservation, ticket.services)
    db.session.add(reservation)
    db.session.commit()

    logger.info("reservation created id=%s reserved_at=%s", reservation.id, reserved_at)
    return reservation


def update_reservation(reservation_id: str, data: dict) -> Reservation:
    """
    Edit a booking that has not started yet.

    Fields not provided keep their current value; services, when provided,
    replace the old lines wholesale and the total is recomputed from them.
    """
    reservation = get_reservation(reservation_id)
    if reservation.status != RESERVATION_SCHEDULED:
        raise InvalidStateError(f"Only scheduled reservations can be edited (status: {reservation.status})")
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON payload")

    services_given = "services" in data or "selections" in data
    ticket = build_ticket(
        staff_id=data.get("staff_id", reservation.staff_id),
        staff_name=data.get("staff_name") if "staff_id" in data else data.get("staff_name", reservation.staff_name),
        member_id=data.get("member_id", reservation.member_id),
        member_name=data.get("member_name", reservation.member_name),
        member_phone=data.get("member_phone", reservation.member_phone),
        services=data.get("services") if services_given else [s.copy_values() for s in reservation.services],
        selections=data.get("selections"),
        total_price=data.get("total_price"),
    )

    reserved_at = reservation.reserved_at
    if "reserved_at" in data:
        reserved_at = _parse_reserved_at(data.get("reserved_at"))
    duration = reservation.estimated_duration
    if "estimated_duration" in data:
        duration = _parse_duration(data.get("estimated_duration"))

    try:
        reservation.member_id = ticket.member_id
        reservation.member_name = ticket.member_name
        reservation.member_phone = ticket.member_phone
        reservation.staff_id = ticket.staff_id
        reservation.staff_name = ticket.staff_name
        reservation.total_price = ticket.total_price
        reservation.reserved_at = reserved_at
        reservation.estimated_duration = duration
        if services_given:
            _replace_services(reservation, ticket.services)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return reservation


def _transition(reservation: Reservation, new_status: str) -> None:
    if new_status not in RESERVATION_STATUSES:
        raise ValidationError(f"status must be one of {', '.join(RESERVATION_STATUSES)}")
    allowed = ALLOWED_TRANSITIONS[reservation.status]
    if new_status not in allowed:
        raise InvalidStateError(
            f"Reservation cannot move from {reservation.status} to {new_status}"
        )
    reservation.status = new_status


def set_status(reservation_id: str, new_status: str) -> Reservation:
    """
    Operator-driven status change.

    Starting is not accepted here: it goes through the seat so the seat and
    the reservation move together.
    """
    reservation = get_reservation(reservation_id)
    if new_status == RESERVATION_IN_PROGRESS:
        raise ValidationError("Start a reservation on a seat instead of setting in_progress")
    if new_status == RESERVATION_SCHEDULED and reservation.status == RESERVATION_IN_PROGRESS:
        raise ValidationError("Cancel the seat session to return a reservation to scheduled")
    _transition(reservation, new_status)
    db.session.commit()
    logger.info("reservation %s -> %s", reservation.id, new_status)
    return reservation


def cancel_reservation(reservation_id: str) -> Reservation:
    return set_status(reservation_id, RESERVATION_CANCELLED)


def delete_reservation(reservation_id: str) -> None:
    reservation = get_reservation(reservation_id)
    if reservation.status == RESERVATION_IN_PROGRESS:
        raise InvalidStateError("Reservation is in progress on a seat; cancel or complete the seat first")
    db.session.delete(reservation)
    db.session.commit()


def list_reservations(
    *,
    status: str | None = None,
    day: date | None = None,
    include_past: bool = False,
    now: datetime | None = None,
) -> list[Reservation]:
    """
    Ordered by reserved_at.

    By default only bookings from the start of today (salon time) onward,
    plus anything currently in progress.
    """
    tz = _salon_tz()
    q = db.session.query(Reservation)

    if status:
        if status not in RESERVATION_STATUSES:
            raise ValidationError(f"status must be one of {', '.join(RESERVATION_STATUSES)}")
        q = q.filter(Reservation.status == status)

    if day is not None:
        start, end = local_day_bounds(day, tz)
        q = q.filter(Reservation.reserved_at >= start, Reservation.reserved_at <= end)

    if not include_past:
        today_start, _ = local_day_bounds(local_today(tz, now), tz)
        q = q.filter(
            or_(
                Reservation.reserved_at >= today_start,
                Reservation.status == RESERVATION_IN_PROGRESS,
            )
        )

    return q.order_by(Reservation.reserved_at.asc(), Reservation.created_at.asc()).all()


# =============================================================================
# SEAT HAND-OFF (called by seat_service inside its transaction)
# =============================================================================

def mark_in_progress(reservation: Reservation, seat_id: int) -> None:
    """scheduled -> in_progress and attach the seat. Does not commit."""
    if reservation.status != RESERVATION_SCHEDULED:
        raise InvalidStateError(
            f"Reservation {reservation.id} is {reservation.status}, only scheduled reservations can start"
        )
    _transition(reservation, RESERVATION_IN_PROGRESS)
    reservation.seat_id = seat_id


def return_to_scheduled(reservation: Reservation) -> None:
    """in_progress -> scheduled and detach the seat. Does not commit."""
    if reservation.status != RESERVATION_IN_PROGRESS:
        return
    _transition(reservation, RESERVATION_SCHEDULED)
    reservation.seat_id = None


def mark_completed(reservation: Reservation) -> None:
    """in_progress -> completed. Does not commit."""
    if reservation.status != RESERVATION_IN_PROGRESS:
        return
    _transition(reservation, RESERVATION_COMPLETED)

