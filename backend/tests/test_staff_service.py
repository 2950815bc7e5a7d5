"""
Staff store tests.
"""

import pytest

from salon.services import staff_service
from salon.validation import ConflictError, NotFoundError


def test_list_in_creation_order(db_session):
    # ids deliberately out of alphabetical order
    for staff_id, name in [("s900", "A"), ("s100", "B"), ("s500", "C")]:
        staff_service.create_staff({"name": name}, staff_id=staff_id)

    assert [s.name for s in staff_service.list_staff()] == ["A", "B", "C"]


def test_create_after_existing_staff_goes_last(db_session, staff):
    staff_service.create_staff({"name": "신입"}, staff_id="s000")
    assert [s.id for s in staff_service.list_staff()] == ["s001", "s002", "s000"]


def test_duplicate_id_is_rejected(db_session, staff):
    with pytest.raises(ConflictError):
        staff_service.create_staff({"name": "중복"}, staff_id="s001")


def test_rename_and_delete(db_session, staff):
    assert staff_service.update_staff("s001", {"name": "원장"}).name == "원장"

    staff_service.delete_staff("s002")
    with pytest.raises(NotFoundError):
        staff_service.get_staff("s002")
