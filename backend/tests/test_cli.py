"""
CLI tests: bootstrap is idempotent and the ledger summary prints totals.
"""

from salon.models import Seat, Staff, User
from salon.services import seat_service

from conftest import cut


def test_system_init_is_idempotent(app, db_session):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["system", "init"])
    assert first.exit_code == 0, first.output
    assert db_session.query(User).filter_by(username="admin").count() == 1
    assert db_session.query(Staff).count() == 5
    assert [s.name for s in db_session.query(Seat).order_by(Seat.id).all()] == [
        f"{n}번 좌석" for n in range(1, 7)
    ]

    second = runner.invoke(args=["system", "init"])
    assert second.exit_code == 0, second.output
    assert "already exists" in second.output
    assert db_session.query(Staff).count() == 5
    assert db_session.query(Seat).count() == 6


def test_users_create_rejects_short_password(app, db_session):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["users", "create", "--username", "kim", "--password", "12"])
    assert result.exit_code != 0
    assert db_session.query(User).count() == 0


def test_ledger_summary(app, db_session, staff, seats):
    seat_service.start_service(seats[0].id, staff_id="s001", member_name="A", services=[cut(20000)])
    seat_service.complete_service(seats[0].id)

    runner = app.test_cli_runner()
    result = runner.invoke(args=["ledger", "summary", "--preset", "today"])
    assert result.exit_code == 0, result.output
    assert "20,000원" in result.output
    assert "Count:   1" in result.output


def test_ledger_summary_bad_range(app, db_session):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["ledger", "summary", "--start", "2026-03-05", "--end", "2026-03-01"])
    assert result.exit_code != 0
