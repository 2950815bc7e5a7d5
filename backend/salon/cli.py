# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/salon/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates tables, the admin user, default staff and six seats.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Users:
# - python -m flask users create --username admin --password 1234
# - python -m flask users list
#
# Seats:
# - python -m flask seats list
# - python -m flask seats create --name "7번 좌석"
#
# Ledger:
# - python -m flask ledger summary --preset week
# - python -m flask ledger summary --start 2026-03-01 --end 2026-03-31

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Seat, Staff, User
from .services import reporting_service, seat_service, staff_service
from .services.auth_service import PasswordValidationError, create_user
from .validation import ConflictError

DEFAULT_ADMIN = ("admin", "1234")

DEFAULT_STAFF = [
    ("staff-1", "원장"),
    ("staff-2", "직원1"),
    ("staff-3", "직원2"),
    ("staff-4", "직원3"),
    ("staff-5", "직원4"),
]

DEFAULT_SEAT_COUNT = 6


def _won(amount: int) -> str:
    return f"{amount:,}원"


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize the salon back office: tables, admin user, staff and seats.

    Safe to run repeatedly; existing records are left alone.

    SECURITY: Change the admin password after the first login!
    """
    click.echo("START Initializing salon back office...")
    db.create_all()

    username, password = DEFAULT_ADMIN
    if db.session.query(User).filter_by(username=username).first():
        click.echo(f"WARN  User '{username}' already exists, skipping...")
    else:
        create_user(username, password)
        click.echo(f"PASS Created user: {username}")

    for staff_id, name in DEFAULT_STAFF:
        if db.session.get(Staff, staff_id):
            continue
        staff_service.create_staff({"name": name}, staff_id=staff_id)
        click.echo(f"PASS Created staff: {name} ({staff_id})")

    existing = db.session.query(Seat).count()
    for number in range(existing + 1, DEFAULT_SEAT_COUNT + 1):
        seat = seat_service.create_seat(f"{number}번 좌석")
        click.echo(f"PASS Created seat: {seat.name} (ID: {seat.id})")

    click.echo("\nDONE Salon back office initialized.")
    click.echo(f"   admin -> {username} / {password} (CHANGE IN PRODUCTION!)")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA, including the revenue ledger!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@click.group('users')
def users_group():
    """Operator account commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@with_appcontext
def create_user_command(username, password):
    """Create an operator account."""
    try:
        user = create_user(username, password)
    except (ConflictError, PasswordValidationError, ValueError) as e:
        raise click.ClickException(str(e))
    click.echo(f"PASS Created user: {user.username} (ID: {user.id})")


@users_group.command('list')
@with_appcontext
def list_users():
    users = db.session.query(User).order_by(User.id.asc()).all()
    if not users:
        click.echo("No users. Run 'python -m flask system init'.")
        return
    for user in users:
        status = "active" if user.is_active else "inactive"
        click.echo(f"{user.id:>3}  {user.username:<20} {status}")


@click.group('seats')
def seats_group():
    """Seat inspection and setup commands."""


@seats_group.command('list')
@with_appcontext
def list_seats():
    for seat in seat_service.list_seats():
        line = f"{seat.id:>3}  {seat.name:<12} {seat.status}"
        session = seat.current_session
        if session is not None:
            line += f"  {session.staff_name} / {session.member_name} / {_won(session.total_price)}"
        click.echo(line)


@seats_group.command('create')
@click.option('--name', required=True, help='Seat name')
@with_appcontext
def create_seat(name):
    seat = seat_service.create_seat(name)
    click.echo(f"PASS Created seat: {seat.name} (ID: {seat.id})")


@click.group('ledger')
def ledger_group():
    """Revenue ledger reports."""


@ledger_group.command('summary')
@click.option('--preset', type=click.Choice(reporting_service.PRESETS), default=None,
              help='Date range preset (default: today, or custom when --start/--end given)')
@click.option('--start', help='Custom range start (YYYY-MM-DD)')
@click.option('--end', help='Custom range end (YYYY-MM-DD)')
@click.option('--staff-id', help='Only this staff member')
@with_appcontext
def ledger_summary(preset, start, end, staff_id):
    """Print revenue totals and breakdowns for a date range."""
    preset = preset or ("custom" if start or end else "today")
    try:
        report = reporting_service.ledger_summary(preset=preset, start=start, end=end, staff_id=staff_id)
    except reporting_service.ReportError as e:
        raise click.ClickException(str(e))

    rng = report["range"]
    click.echo(f"Range: {rng['start_date']} .. {rng['end_date']} ({rng['preset']})")
    click.echo(f"Revenue: {_won(report['total_revenue'])}")
    click.echo(f"Count:   {report['total_count']}")
    click.echo(f"Average: {_won(report['average_ticket'])}")

    click.echo("\nBy seat:")
    for row in report["by_seat"]:
        click.echo(f"  {row['seat_name']:<12} {row['count']:>4}  {_won(row['revenue'])}")

    click.echo("\nBy staff:")
    for row in report["by_staff"]:
        click.echo(f"  {row['staff_name']:<12} {row['count']:>4}  {_won(row['revenue'])}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(seats_group)
    app.cli.add_command(ledger_group)
