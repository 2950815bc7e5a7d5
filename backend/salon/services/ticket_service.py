# Overview: Shared validation for the "who / by whom / what" part of a session or reservation.

"""
A ticket is the customer, stylist and priced services attached to a seat
session or a reservation. Both go through build_ticket so they obey the
same rules:

- staff_id is required and must exist; staff_name defaults to the current name
- member_id is optional; when given it must exist and fills in name/phone
- guests (no member_id) need a member_name
- at least one service; prices are values, copied from the menu once
- total_price, when the caller sends one, must equal the sum of the lines
"""

from __future__ import annotations

from dataclasses import dataclass

from ..validation import ValidationError, require_price
from . import catalog_service, member_service, staff_service


@dataclass
class Ticket:
    member_id: str | None
    member_name: str
    member_phone: str | None
    staff_id: str
    staff_name: str
    services: list[dict]
    total_price: int


def _clean(value) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def build_ticket(
    *,
    staff_id: str | None,
    staff_name: str | None = None,
    member_id: str | None = None,
    member_name: str | None = None,
    member_phone: str | None = None,
    services=None,
    selections=None,
    total_price=None,
) -> Ticket:
    staff_id = _clean(staff_id)
    if not staff_id:
        raise ValidationError("staff_id is required")
    staff = staff_service.get_staff(staff_id)
    staff_name = _clean(staff_name) or staff.name

    member_id = _clean(member_id)
    member_name = _clean(member_name)
    member_phone = _clean(member_phone)
    if member_id:
        member = member_service.get_member(member_id)
        member_name = member_name or member.name
        member_phone = member_phone or member.phone
    if not member_name:
        raise ValidationError("member_name is required for guests")

    if selections is not None:
        if not selections:
            raise ValidationError("At least one service must be selected")
        lines = catalog_service.select_services(selections)
    else:
        lines = catalog_service.normalize_services(services)

    computed = catalog_service.total_of(lines)
    if total_price is not None:
        total_price = require_price(total_price, "total_price")
        if total_price != computed:
            raise ValidationError(
                f"total_price {total_price} does not match the sum of service prices {computed}"
            )

    return Ticket(
        member_id=member_id,
        member_name=member_name,
        member_phone=member_phone,
        staff_id=staff_id,
        staff_name=staff_name,
        services=lines,
        total_price=computed,
    )
