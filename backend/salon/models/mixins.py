from __future__ import annotations

import uuid

from ..extensions import db


def new_id() -> str:
    """String primary key for members, staff, sessions, reservations and ledger entries."""
    return str(uuid.uuid4())


def next_position(model) -> int:
    """
    Insertion rank for models listed in creation order.

    created_at only has second resolution, so rows added in the same second
    need an explicit tiebreak.
    """
    current = db.session.query(db.func.max(model.position)).scalar()
    return (current or 0) + 1
