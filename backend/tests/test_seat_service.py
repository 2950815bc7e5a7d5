"""
Seat / session engine tests.

Verifies:
- available -> in_use -> available, and in_use -> available on cancel
- current_session present <=> status == in_use
- rejected operations leave seat, ledger and stamps untouched
- completion writes exactly one ledger entry and one stamp, atomically
"""

import pytest

from salon.extensions import db
from salon.models import LedgerEntry, Reservation, Seat, SelectedService, ServiceSession
from salon.services import catalog_service, member_service, reservation_service, seat_service
from salon.services.catalog_service import MenuItem
from salon.validation import InvalidStateError, NotFoundError, ValidationError

from conftest import cut


def _assert_consistent(seat: Seat):
    assert (seat.status == "in_use") == (seat.current_session is not None)


def _ledger_count() -> int:
    return db.session.query(LedgerEntry).count()


# =============================================================================
# START
# =============================================================================


class TestStartService:

    def test_start_guest_session(self, db_session, staff, seats):
        seat = seat_service.start_service(
            seats[0].id,
            staff_id="s001",
            staff_name="직원1",
            member_name="손님1",
            services=[cut()],
            total_price=11000,
        )

        assert seat.status == "in_use"
        session = seat.current_session
        assert session is not None
        assert session.member_id is None
        assert session.member_name == "손님1"
        assert session.staff_name == "직원1"
        assert session.total_price == 11000
        assert [s.copy_values() for s in session.services] == [cut()]
        assert session.start_time is not None
        _assert_consistent(seat)

    def test_start_fills_snapshot_names(self, db_session, staff, seats, member):
        seat = seat_service.start_service(
            seats[0].id,
            staff_id="s002",
            member_id=member.id,
            services=[cut()],
        )
        assert seat.current_session.staff_name == "직원2"
        assert seat.current_session.member_name == "홍길동"

    def test_start_from_menu_selections(self, db_session, staff, seats):
        seat = seat_service.start_service(
            seats[0].id,
            staff_id="s001",
            member_name="손님",
            selections=[
                {"service_id": "perm-basic", "length": "medium"},
                {"service_id": "cut-female", "options": ["샴푸"]},
            ],
        )
        lines = [s.copy_values() for s in seat.current_session.services]
        assert lines == [
            {"name": "기본 (건강모/일반)", "length": "medium", "price": 44000},
            {"name": "여자컷트 + 샴푸", "length": None, "price": 16000},
        ]
        assert seat.current_session.total_price == 60000

    def test_start_on_occupied_seat_is_rejected(self, db_session, staff, seats):
        seat_id = seats[0].id
        seat_service.start_service(seat_id, staff_id="s001", member_name="A", services=[cut()])
        first_session_id = seat_service.get_seat(seat_id).current_session.id

        with pytest.raises(InvalidStateError):
            seat_service.start_service(seat_id, staff_id="s002", member_name="B", services=[cut(20000)])

        seat = seat_service.get_seat(seat_id)
        assert seat.status == "in_use"
        assert seat.current_session.id == first_session_id
        assert seat.current_session.member_name == "A"
        assert db.session.query(ServiceSession).count() == 1

    def test_start_on_reserved_seat_is_rejected(self, db_session, staff, seats):
        seat = seats[1]
        seat.status = "reserved"
        db_session.commit()

        with pytest.raises(InvalidStateError):
            seat_service.start_service(seat.id, staff_id="s001", member_name="A", services=[cut()])
        assert seat_service.get_seat(seat.id).status == "reserved"
        assert seat_service.get_seat(seat.id).current_session is None

    def test_unknown_seat(self, db_session, staff, seats):
        with pytest.raises(NotFoundError):
            seat_service.start_service(9999, staff_id="s001", member_name="A", services=[cut()])

    def test_staff_is_required(self, db_session, staff, seats):
        with pytest.raises(ValidationError):
            seat_service.start_service(seats[0].id, staff_id=None, member_name="A", services=[cut()])
        assert seat_service.get_seat(seats[0].id).status == "available"

    def test_unknown_staff(self, db_session, staff, seats):
        with pytest.raises(NotFoundError):
            seat_service.start_service(seats[0].id, staff_id="nobody", member_name="A", services=[cut()])

    def test_services_are_required(self, db_session, staff, seats):
        with pytest.raises(ValidationError):
            seat_service.start_service(seats[0].id, staff_id="s001", member_name="A", services=[])
        assert seat_service.get_seat(seats[0].id).status == "available"

    def test_guest_needs_a_name(self, db_session, staff, seats):
        with pytest.raises(ValidationError):
            seat_service.start_service(seats[0].id, staff_id="s001", services=[cut()])

    def test_total_must_match_lines(self, db_session, staff, seats):
        with pytest.raises(ValidationError):
            seat_service.start_service(
                seats[0].id, staff_id="s001", member_name="A",
                services=[cut(11000), cut(5000, "샴푸")], total_price=11000,
            )
        seat = seat_service.get_seat(seats[0].id)
        assert seat.status == "available"
        _assert_consistent(seat)


# =============================================================================
# COMPLETE
# =============================================================================


class TestCompleteService:

    def test_scenario_guest_cut(self, db_session, staff, seats, member):
        seat_id = seats[0].id
        seat_service.start_service(
            seat_id,
            staff_id="s001",
            staff_name="직원1",
            services=[cut()],
            total_price=11000,
            member_name="손님1",
        )
        assert seat_service.get_seat(seat_id).status == "in_use"

        result = seat_service.complete_service(seat_id)

        seat = seat_service.get_seat(seat_id)
        assert seat.status == "available"
        assert seat.current_session is None
        entries = db.session.query(LedgerEntry).all()
        assert len(entries) == 1
        assert entries[0].total_price == 11000
        assert entries[0].seat_id == seat_id
        assert result.stamps is None
        assert member_service.get_member(member.id).stamps == 0

    def test_scenario_member_reaches_goal(self, db_session, staff, seats, member):
        member.stamps = 9
        db_session.commit()
        assert not member_service.is_benefit_eligible(member)

        seat_service.start_service(seats[1].id, staff_id="s001", member_id=member.id, services=[cut()])
        result = seat_service.complete_service(seats[1].id)

        refreshed = member_service.get_member(member.id)
        assert refreshed.stamps == 10
        assert result.stamps == 10
        assert result.benefit_eligible is True
        assert member_service.serialize(refreshed)["benefit_eligible"] is True

    def test_scenario_complete_available_seat(self, db_session, staff, seats, member):
        with pytest.raises(InvalidStateError):
            seat_service.complete_service(seats[0].id)

        assert _ledger_count() == 0
        assert member_service.get_member(member.id).stamps == 0
        seat = seat_service.get_seat(seats[0].id)
        assert seat.status == "available"
        _assert_consistent(seat)

    def test_complete_copies_session_into_ledger(self, db_session, staff, seats, member):
        seat_service.start_service(
            seats[0].id, staff_id="s002", member_id=member.id,
            services=[cut(11000), cut(5000, "샴푸")],
        )
        result = seat_service.complete_service(seats[0].id)

        entry = result.entry
        assert entry.member_id == member.id
        assert entry.member_name == "홍길동"
        assert entry.staff_id == "s002"
        assert entry.staff_name == "직원2"
        assert entry.total_price == 16000
        assert [s.price for s in entry.services] == [11000, 5000]
        assert entry.completed_at is not None

        # session lines are gone, ledger lines stay
        assert db.session.query(ServiceSession).count() == 0
        assert db.session.query(SelectedService).filter(SelectedService.session_id.isnot(None)).count() == 0
        assert db.session.query(SelectedService).filter_by(ledger_entry_id=entry.id).count() == 2

    def test_complete_twice_writes_one_entry(self, db_session, staff, seats):
        seat_service.start_service(seats[0].id, staff_id="s001", member_name="A", services=[cut()])
        seat_service.complete_service(seats[0].id)
        with pytest.raises(InvalidStateError):
            seat_service.complete_service(seats[0].id)
        assert _ledger_count() == 1

    def test_price_change_after_start_does_not_touch_total(self, db_session, staff, seats, monkeypatch):
        seat_service.start_service(
            seats[0].id, staff_id="s001", member_name="A",
            selections=[{"service_id": "cut-male"}],
        )
        monkeypatch.setitem(
            catalog_service._BY_ID,
            "cut-male",
            MenuItem("cut-male", "기본 서비스", "남자컷트", price=99000),
        )

        result = seat_service.complete_service(seats[0].id)
        assert result.entry.total_price == 11000

    def test_failed_completion_rolls_back_everything(self, db_session, staff, seats, member, monkeypatch):
        seat_id = seats[0].id
        seat_service.start_service(seat_id, staff_id="s001", member_id=member.id, services=[cut()])

        def boom(_member):
            raise RuntimeError("disk full")

        monkeypatch.setattr(member_service, "credit_stamp", boom)
        with pytest.raises(RuntimeError):
            seat_service.complete_service(seat_id)

        seat = seat_service.get_seat(seat_id)
        assert seat.status == "in_use"
        assert seat.current_session is not None
        assert _ledger_count() == 0
        assert member_service.get_member(member.id).stamps == 0

    def test_deleted_member_still_books_revenue(self, db_session, staff, seats, member):
        seat_service.start_service(seats[0].id, staff_id="s001", member_id=member.id, services=[cut()])
        member_service.delete_member(member.id)

        result = seat_service.complete_service(seats[0].id)
        assert result.stamps is None
        assert result.entry.member_name == "홍길동"


# =============================================================================
# CANCEL
# =============================================================================


class TestCancelService:

    def test_cancel_discards_session(self, db_session, staff, seats, member):
        seat_service.start_service(seats[0].id, staff_id="s001", member_id=member.id, services=[cut()])
        seat = seat_service.cancel_service(seats[0].id)

        assert seat.status == "available"
        assert seat.current_session is None
        assert _ledger_count() == 0
        assert member_service.get_member(member.id).stamps == 0
        assert db.session.query(SelectedService).count() == 0

    def test_cancel_available_seat_is_rejected(self, db_session, staff, seats):
        with pytest.raises(InvalidStateError):
            seat_service.cancel_service(seats[0].id)
        assert seat_service.get_seat(seats[0].id).status == "available"


# =============================================================================
# RESERVATION HAND-OFF
# =============================================================================


def _book(member=None, **overrides) -> Reservation:
    data = {
        "staff_id": "s001",
        "member_id": member.id if member else None,
        "member_name": None if member else "예약손님",
        "services": [cut()],
        "reserved_at": "2026-03-02T05:00:00Z",
        "estimated_duration": 30,
    }
    data.update(overrides)
    return reservation_service.create_reservation(data)


class TestReservationHandOff:

    def test_start_reservation_marks_in_progress(self, db_session, staff, seats, member):
        reservation = _book(member)
        seat = seat_service.start_reservation(reservation.id, seats[2].id)

        assert seat.current_session.reservation_id == reservation.id
        assert seat.current_session.member_id == member.id
        refreshed = reservation_service.get_reservation(reservation.id)
        assert refreshed.status == "in_progress"
        assert refreshed.seat_id == seats[2].id

    def test_completion_leaves_reservation_in_progress(self, db_session, staff, seats, member):
        reservation = _book(member)
        seat_service.start_reservation(reservation.id, seats[0].id)
        result = seat_service.complete_service(seats[0].id)

        assert result.entry.reservation_id == reservation.id
        assert reservation_service.get_reservation(reservation.id).status == "in_progress"

    def test_completion_can_close_reservation(self, app, db_session, staff, seats, member, monkeypatch):
        monkeypatch.setitem(app.config, "COMPLETE_LINKED_RESERVATION", True)
        reservation = _book(member)
        seat_service.start_reservation(reservation.id, seats[0].id)
        seat_service.complete_service(seats[0].id)

        assert reservation_service.get_reservation(reservation.id).status == "completed"

    def test_cancel_returns_reservation_to_scheduled(self, db_session, staff, seats):
        reservation = _book()
        seat_service.start_reservation(reservation.id, seats[0].id)
        seat_service.cancel_service(seats[0].id)

        refreshed = reservation_service.get_reservation(reservation.id)
        assert refreshed.status == "scheduled"
        assert refreshed.seat_id is None
        # reservation keeps its own service lines
        assert [s.copy_values() for s in refreshed.services] == [cut()]

    def test_cannot_start_cancelled_reservation(self, db_session, staff, seats):
        reservation = _book()
        reservation_service.cancel_reservation(reservation.id)

        with pytest.raises(InvalidStateError):
            seat_service.start_reservation(reservation.id, seats[0].id)
        seat = seat_service.get_seat(seats[0].id)
        assert seat.status == "available"
        assert seat.current_session is None

    def test_unknown_reservation(self, db_session, staff, seats):
        with pytest.raises(NotFoundError):
            seat_service.start_service(
                seats[0].id, staff_id="s001", member_name="A", services=[cut()], reservation_id="missing",
            )
        assert seat_service.get_seat(seats[0].id).status == "available"


def test_every_seat_stays_consistent(db_session, staff, seats, member):
    seat_service.start_service(seats[0].id, staff_id="s001", member_name="A", services=[cut()])
    seat_service.start_service(seats[1].id, staff_id="s002", member_id=member.id, services=[cut()])
    seat_service.complete_service(seats[1].id)
    seat_service.start_service(seats[2].id, staff_id="s001", member_name="C", services=[cut()])
    seat_service.cancel_service(seats[2].id)

    for seat in seat_service.list_seats():
        _assert_consistent(seat)
    assert [s.status for s in seat_service.list_seats()] == ["in_use", "available", "available"]
