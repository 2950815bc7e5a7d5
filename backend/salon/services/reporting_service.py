# Overview: Service-layer operations for reporting; pure aggregates over ledger entries.

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Mapping, Sequence
from zoneinfo import ZoneInfo

from flask import current_app

from ..extensions import db
from ..models import Seat, Staff
from ..time_utils import (
    iso_week_start,
    local_day_bounds,
    local_today,
    month_end,
    month_start,
    parse_iso_date,
    to_local_date,
    to_utc_z,
)
from . import ledger_service

"""
Reporting invariants:

- Every aggregate reads ledger entries only; nothing here writes.
- Ranges are inclusive on both ends and matched on completed_at.
- The per-seat and per-staff rows sum to the same revenue/count as the totals
  whenever every entry belongs to a listed seat / staff member.
"""

PRESETS = ("today", "week", "month", "custom")


class ReportError(Exception):
    """Raised when report parameters are invalid."""
    pass


@dataclass(frozen=True)
class DateRange:
    preset: str
    start_day: date
    end_day: date
    start: datetime  # UTC-naive, inclusive
    end: datetime    # UTC-naive, inclusive

    def to_dict(self) -> dict:
        return {
            "preset": self.preset,
            "start_date": self.start_day.isoformat(),
            "end_date": self.end_day.isoformat(),
            "start": to_utc_z(self.start),
            "end": to_utc_z(self.end),
        }


def _field(entry: Any, name: str):
    if isinstance(entry, Mapping):
        return entry[name]
    return getattr(entry, name)


def salon_timezone() -> ZoneInfo:
    return ZoneInfo(current_app.config.get("SALON_TIMEZONE", "UTC"))


# =============================================================================
# DATE RANGES
# =============================================================================

def date_range(
    preset: str = "today",
    *,
    tz: ZoneInfo,
    now: datetime | None = None,
    start: str | date | None = None,
    end: str | date | None = None,
) -> DateRange:
    """
    Resolve a report window in salon-local days.

    - today: start/end of the current local day
    - week: ISO week (Monday 00:00 through Sunday 23:59:59.999999)
    - month: calendar month
    - custom: start..end dates, both days included
    """
    today = local_today(tz, now)

    if preset == "today":
        first, last = today, today
    elif preset == "week":
        first = iso_week_start(today)
        last = first + timedelta(days=6)
    elif preset == "month":
        first, last = month_start(today), month_end(today)
    elif preset == "custom":
        try:
            first = start if isinstance(start, date) else parse_iso_date(start)
            last = end if isinstance(end, date) else parse_iso_date(end)
        except ValueError:
            raise ReportError("start and end must be YYYY-MM-DD dates")
        if first is None or last is None:
            raise ReportError("custom range requires start and end")
        if last < first:
            raise ReportError("end must not be before start")
    else:
        raise ReportError(f"preset must be one of {', '.join(PRESETS)}")

    range_start, _ = local_day_bounds(first, tz)
    _, range_end = local_day_bounds(last, tz)
    return DateRange(preset=preset, start_day=first, end_day=last, start=range_start, end=range_end)


def in_range(entries: Iterable[Any], start: datetime, end: datetime) -> list[Any]:
    return [e for e in entries if start <= _field(e, "completed_at") <= end]


# =============================================================================
# AGGREGATES
# =============================================================================

def total_revenue(entries: Iterable[Any]) -> int:
    return sum(int(_field(e, "total_price")) for e in entries)


def total_count(entries: Iterable[Any]) -> int:
    return sum(1 for _ in entries)


def average_ticket(entries: Sequence[Any]) -> int:
    """Revenue / count rounded to the nearest won; 0 when there are no entries."""
    count = total_count(entries)
    if count == 0:
        return 0
    avg = Decimal(total_revenue(entries)) / Decimal(count)
    return int(avg.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _grouped(entries: Iterable[Any], key: str) -> dict:
    totals: dict = {}
    for e in entries:
        bucket = totals.setdefault(_field(e, key), [0, 0])
        bucket[0] += int(_field(e, "total_price"))
        bucket[1] += 1
    return totals


def revenue_by_seat(entries: Iterable[Any], seats: Sequence[Any]) -> list[dict]:
    """
    One row per known seat, highest revenue first.

    Seats with no sales are included with zeros; ties keep seat order.
    """
    totals = _grouped(entries, "seat_id")
    rows = []
    for seat in seats:
        seat_id = _field(seat, "id")
        revenue, count = totals.get(seat_id, (0, 0))
        rows.append({
            "seat_id": seat_id,
            "seat_name": _field(seat, "name"),
            "revenue": revenue,
            "count": count,
        })
    rows.sort(key=lambda r: r["revenue"], reverse=True)
    return rows


def revenue_by_staff(entries: Iterable[Any], staff: Sequence[Any]) -> list[dict]:
    """
    One row per current staff member, highest revenue first.

    The displayed name is the staff member's current name, not the snapshot
    stored on the entries.
    """
    totals = _grouped(entries, "staff_id")
    rows = []
    for member in staff:
        staff_id = _field(member, "id")
        revenue, count = totals.get(staff_id, (0, 0))
        rows.append({
            "staff_id": staff_id,
            "staff_name": _field(member, "name"),
            "revenue": revenue,
            "count": count,
        })
    rows.sort(key=lambda r: r["revenue"], reverse=True)
    return rows


def revenue_by_service(entries: Iterable[Any]) -> list[dict]:
    """Per service name: number of lines sold and their revenue."""
    totals: "OrderedDict[str, list[int]]" = OrderedDict()
    for e in entries:
        for line in _field(e, "services"):
            name = _field(line, "name")
            bucket = totals.setdefault(name, [0, 0])
            bucket[0] += 1
            bucket[1] += int(_field(line, "price"))
    rows = [
        {"service_name": name, "count": count, "revenue": revenue}
        for name, (count, revenue) in totals.items()
    ]
    rows.sort(key=lambda r: (r["revenue"], r["count"]), reverse=True)
    return rows


def daily_summary(entries: Iterable[Any], tz: ZoneInfo) -> list[dict]:
    """Revenue and count per local calendar date, oldest first."""
    days: dict[date, list[int]] = {}
    for e in entries:
        day = to_local_date(_field(e, "completed_at"), tz)
        bucket = days.setdefault(day, [0, 0])
        bucket[0] += int(_field(e, "total_price"))
        bucket[1] += 1
    return [
        {"date": day.isoformat(), "revenue": revenue, "count": count}
        for day, (revenue, count) in sorted(days.items())
    ]


# =============================================================================
# REPORTS (query + aggregate)
# =============================================================================

def ledger_summary(
    *,
    preset: str = "today",
    start: str | None = None,
    end: str | None = None,
    staff_id: str | None = None,
    now: datetime | None = None,
) -> dict:
    tz = salon_timezone()
    window = date_range(preset, tz=tz, now=now, start=start, end=end)
    entries = ledger_service.list_entries(start=window.start, end=window.end, staff_id=staff_id)

    seats = db.session.query(Seat).order_by(Seat.id.asc()).all()
    staff = db.session.query(Staff).order_by(Staff.position.asc(), Staff.id.asc()).all()
    if staff_id:
        staff = [s for s in staff if s.id == staff_id]

    return {
        "range": window.to_dict(),
        "staff_id": staff_id,
        "total_revenue": total_revenue(entries),
        "total_count": total_count(entries),
        "average_ticket": average_ticket(entries),
        "by_seat": revenue_by_seat(entries, seats),
        "by_staff": revenue_by_staff(entries, staff),
        "by_service": revenue_by_service(entries),
    }


def monthly_daily_summary(*, year: int | None = None, month: int | None = None, now: datetime | None = None) -> dict:
    """Day-by-day revenue for one calendar month (defaults to the current one)."""
    tz = salon_timezone()
    today = local_today(tz, now)
    year = year or today.year
    month = month or today.month
    try:
        first = date(year, month, 1)
    except ValueError:
        raise ReportError("year/month out of range")

    window = date_range("custom", tz=tz, start=first, end=month_end(first))
    entries = ledger_service.list_entries(start=window.start, end=window.end)
    return {
        "year": year,
        "month": month,
        "days": daily_summary(entries, tz),
        "total_revenue": total_revenue(entries),
        "total_count": total_count(entries),
    }
