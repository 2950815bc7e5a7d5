# Overview: Service-layer operations for staff; plain CRUD.

from __future__ import annotations

from ..extensions import db
from ..models import Staff
from ..models.mixins import next_position
from ..validation import ModelValidationPolicy, NotFoundError, ConflictError, validate_payload


STAFF_POLICY = ModelValidationPolicy(
    writable_fields={"name"},
    required_on_create={"name"},
)


def get_staff(staff_id: str) -> Staff:
    staff = db.session.get(Staff, staff_id)
    if staff is None:
        raise NotFoundError(f"Staff {staff_id} not found")
    return staff


def list_staff() -> list[Staff]:
    """In creation order (matches how the shop lists its stylists)."""
    return db.session.query(Staff).order_by(Staff.position.asc(), Staff.id.asc()).all()


def create_staff(payload: dict, staff_id: str | None = None) -> Staff:
    data = validate_payload(model=Staff, payload=payload, policy=STAFF_POLICY, partial=False)
    if staff_id is not None and db.session.get(Staff, staff_id) is not None:
        raise ConflictError(f"Staff {staff_id} already exists")

    staff = Staff(name=data["name"], position=next_position(Staff))
    if staff_id is not None:
        staff.id = staff_id
    db.session.add(staff)
    db.session.commit()
    return staff


def update_staff(staff_id: str, payload: dict) -> Staff:
    """
    Rename a staff member.

    Existing sessions, reservations and ledger entries keep the name they
    were created with.
    """
    staff = get_staff(staff_id)
    patch = validate_payload(model=Staff, payload=payload, policy=STAFF_POLICY, partial=True)
    for key, value in patch.items():
        setattr(staff, key, value)
    db.session.commit()
    return staff


def delete_staff(staff_id: str) -> None:
    staff = get_staff(staff_id)
    db.session.delete(staff)
    db.session.commit()
