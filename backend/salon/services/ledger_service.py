# Overview: Service-layer operations for the revenue ledger; append and read only.

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..extensions import db
from ..models import LedgerEntry, SelectedService, ServiceSession
from ..validation import NotFoundError
"""
Ledger Invariants (authoritative)

- Append-only: one entry per completed seat session, never updated or deleted.
- Entries are written inside the same DB transaction as the seat completion.
- completed_at is business time; created_at is system time (DB default).
- Range filtering is inclusive on both ends: start <= completed_at <= end.
"""


def append_entry(
    *,
    session: ServiceSession,
    seat_id: int,
    completed_at: datetime,
) -> LedgerEntry:
    """
    Append the ledger entry for a finished session.

    - Copies every field and service line by value.
    - Flushes, never commits: the caller owns the transaction.
    """
    entry = LedgerEntry(
        reservation_id=session.reservation_id,
        member_id=session.member_id,
        member_name=session.member_name,
        seat_id=seat_id,
        staff_id=session.staff_id,
        staff_name=session.staff_name,
        total_price=session.total_price,
        completed_at=completed_at,
    )
    db.session.add(entry)
    db.session.flush()  # ensures entry.id is assigned without committing

    for line in session.services:
        db.session.add(SelectedService(ledger_entry_id=entry.id, **line.copy_values()))
    db.session.flush()
    return entry


def get_entry(entry_id: str) -> LedgerEntry:
    entry = db.session.get(LedgerEntry, entry_id)
    if entry is None:
        raise NotFoundError(f"Ledger entry {entry_id} not found")
    return entry


def list_entries(
    *,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    staff_id: Optional[str] = None,
    seat_id: Optional[int] = None,
    limit: Optional[int] = None,
) -> list[LedgerEntry]:
    """Newest first."""
    q = db.session.query(LedgerEntry)
    if start is not None:
        q = q.filter(LedgerEntry.completed_at >= start)
    if end is not None:
        q = q.filter(LedgerEntry.completed_at <= end)
    if staff_id:
        q = q.filter(LedgerEntry.staff_id == staff_id)
    if seat_id is not None:
        q = q.filter(LedgerEntry.seat_id == seat_id)

    q = q.order_by(LedgerEntry.completed_at.desc(), LedgerEntry.created_at.desc())
    if limit is not None:
        q = q.limit(limit)
    return q.all()
