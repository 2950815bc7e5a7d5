# Overview: Flask API routes for the revenue ledger; read-only.

from flask import Blueprint, jsonify, request

from ..decorators import require_auth
from ..services import ledger_service
from ..services.reporting_service import salon_timezone
from ..time_utils import local_day_bounds, parse_iso_date, parse_iso_datetime
from ..validation import NotFoundError


ledger_bp = Blueprint("ledger", __name__, url_prefix="/api/ledger")


def _parse_bound(value, *, end: bool):
    """A bare YYYY-MM-DD covers that whole salon-local day."""
    if value and len(value.strip()) == 10:
        first, last = local_day_bounds(parse_iso_date(value), salon_timezone())
        return last if end else first
    return parse_iso_datetime(value)


@ledger_bp.get("")
@ledger_bp.get("/")
@require_auth
def list_ledger_route():
    """
    Query params (all optional):
    - start / end: ISO-8601 datetimes or YYYY-MM-DD dates, inclusive
    - staff_id, seat_id
    - limit (default 200)
    """
    try:
        start = _parse_bound(request.args.get("start"), end=False)
        end = _parse_bound(request.args.get("end"), end=True)
    except ValueError:
        return jsonify({"error": "start/end must be ISO-8601 dates or datetimes"}), 400

    limit = request.args.get("limit", default=200, type=int)
    entries = ledger_service.list_entries(
        start=start,
        end=end,
        staff_id=request.args.get("staff_id"),
        seat_id=request.args.get("seat_id", type=int),
        limit=limit,
    )
    return jsonify({"entries": [e.to_dict() for e in entries]}), 200


@ledger_bp.get("/<entry_id>")
@require_auth
def get_ledger_entry_route(entry_id: str):
    try:
        return jsonify({"entry": ledger_service.get_entry(entry_id).to_dict()}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
