# Overview: Service-layer operations for members; CRUD plus the loyalty stamp card.

"""
Member Store

WHY: Regulars are looked up by phone at the front desk and earn one stamp
per completed visit. Reaching the stamp goal unlocks a benefit; redeeming it
is an explicit operator action, never automatic.
"""

from __future__ import annotations

import logging

from flask import current_app
from sqlalchemy import or_

from ..extensions import db
from ..models import Member
from ..models.members import DEFAULT_STAMP_GOAL
from ..models.mixins import next_position
from ..validation import (
    ConflictError,
    ModelValidationPolicy,
    NotFoundError,
    validate_payload,
)

logger = logging.getLogger(__name__)

MEMBER_POLICY = ModelValidationPolicy(
    writable_fields={"name", "phone"},
    required_on_create={"name", "phone"},
)


def stamp_goal() -> int:
    return int(current_app.config.get("STAMP_GOAL", DEFAULT_STAMP_GOAL))


def serialize(member: Member) -> dict:
    return member.to_dict(stamp_goal=stamp_goal())


def _ensure_phone_free(phone: str, exclude_id: str | None = None) -> None:
    q = db.session.query(Member).filter(Member.phone == phone)
    if exclude_id is not None:
        q = q.filter(Member.id != exclude_id)
    if q.first() is not None:
        raise ConflictError("Phone number is already registered")


def get_member(member_id: str) -> Member:
    member = db.session.get(Member, member_id)
    if member is None:
        raise NotFoundError(f"Member {member_id} not found")
    return member


def create_member(payload: dict) -> Member:
    data = validate_payload(model=Member, payload=payload, policy=MEMBER_POLICY, partial=False)
    _ensure_phone_free(data["phone"])

    member = Member(name=data["name"], phone=data["phone"], stamps=0, position=next_position(Member))
    db.session.add(member)
    db.session.commit()
    logger.info("member created id=%s", member.id)
    return member


def update_member(member_id: str, payload: dict) -> Member:
    """Partial update: only the provided fields are merged."""
    member = get_member(member_id)
    patch = validate_payload(model=Member, payload=payload, policy=MEMBER_POLICY, partial=True)

    if "phone" in patch:
        _ensure_phone_free(patch["phone"], exclude_id=member.id)

    for key, value in patch.items():
        setattr(member, key, value)
    db.session.commit()
    return member


def delete_member(member_id: str) -> None:
    """
    Delete a member record.

    Ledger entries and reservations keep their member_id/member_name
    snapshot; nothing cascades.
    """
    member = get_member(member_id)
    db.session.delete(member)
    db.session.commit()
    logger.info("member deleted id=%s", member_id)


def list_members(search: str | None = None) -> list[Member]:
    """Newest first; optional substring match on name or phone."""
    q = db.session.query(Member)
    if search:
        # LIKE wildcards in the search text match literally
        term = search.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{term}%"
        q = q.filter(or_(
            Member.name.like(pattern, escape="\\"),
            Member.phone.like(pattern, escape="\\"),
        ))
    return q.order_by(Member.position.desc(), Member.id.asc()).all()


def find_by_phone(phone: str) -> Member:
    """Exact phone lookup."""
    member = db.session.query(Member).filter(Member.phone == phone.strip()).first()
    if member is None:
        raise NotFoundError("Member not found")
    return member


# =============================================================================
# STAMPS
# =============================================================================

def credit_stamp(member: Member) -> int:
    """
    Add one stamp without committing.

    Used by seat completion so the stamp lands in the same transaction as
    the ledger entry.
    """
    member.stamps = (member.stamps or 0) + 1
    return member.stamps


def add_stamp(member_id: str) -> int:
    """Manually add one stamp; returns the new count."""
    member = get_member(member_id)
    count = credit_stamp(member)
    db.session.commit()
    return count


def use_stamps(member_id: str) -> int:
    """
    Redeem one benefit: subtract the stamp goal, floored at 0.

    Returns the remaining stamp count.
    """
    member = get_member(member_id)
    member.stamps = max(0, (member.stamps or 0) - stamp_goal())
    db.session.commit()
    logger.info("stamps redeemed member=%s remaining=%s", member_id, member.stamps)
    return member.stamps


def reset_stamps(member_id: str) -> Member:
    member = get_member(member_id)
    member.stamps = 0
    db.session.commit()
    return member


def is_benefit_eligible(member: Member) -> bool:
    return member.is_benefit_eligible(stamp_goal())
