# Overview: Flask API routes for reservations operations; parses input and returns JSON responses.

"""
Reservation API Routes

- Booking CRUD (edits allowed while scheduled)
- Operator status changes: cancel, mark completed
- Start: hand a scheduled booking to a seat (seat + booking move together)
"""

from flask import Blueprint, current_app, jsonify, request

from ..decorators import require_auth
from ..services import reservation_service, seat_service
from ..time_utils import parse_iso_date
from ..validation import InvalidStateError, NotFoundError, ValidationError


reservations_bp = Blueprint("reservations", __name__, url_prefix="/api/reservations")


@reservations_bp.get("")
@reservations_bp.get("/")
@require_auth
def list_reservations_route():
    """
    Query params:
    - status: scheduled | in_progress | completed | cancelled
    - date: YYYY-MM-DD (salon-local day)
    - include_past: true to include bookings before today
    """
    status = request.args.get("status")
    include_past = request.args.get("include_past", "false").lower() == "true"
    try:
        day = parse_iso_date(request.args.get("date"))
    except ValueError:
        return jsonify({"error": "date must be YYYY-MM-DD"}), 400

    try:
        reservations = reservation_service.list_reservations(
            status=status,
            day=day,
            include_past=include_past,
        )
        return jsonify({"reservations": [r.to_dict() for r in reservations]}), 200
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400


@reservations_bp.post("")
@reservations_bp.post("/")
@require_auth
def create_reservation_route():
    """
    Request body:
    {
        "staff_id": "staff-1",
        "member_id": "..." | null,
        "member_name": "홍길동",
        "member_phone": "010-1234-5678",
        "services": [{"name": "남자컷트", "length": null, "price": 11000}],
        "reserved_at": "2026-03-02T05:00:00Z",
        "estimated_duration": 60
    }
    """
    try:
        reservation = reservation_service.create_reservation(request.get_json(silent=True))
        return jsonify({"reservation": reservation.to_dict()}), 201
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create reservation")
        return jsonify({"error": "Internal server error"}), 500


@reservations_bp.get("/<reservation_id>")
@require_auth
def get_reservation_route(reservation_id: str):
    try:
        reservation = reservation_service.get_reservation(reservation_id)
        return jsonify({"reservation": reservation.to_dict()}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@reservations_bp.patch("/<reservation_id>")
@reservations_bp.put("/<reservation_id>")
@require_auth
def update_reservation_route(reservation_id: str):
    try:
        reservation = reservation_service.update_reservation(reservation_id, request.get_json(silent=True))
        return jsonify({"reservation": reservation.to_dict()}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except InvalidStateError as e:
        return jsonify({"error": str(e)}), 409
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update reservation")
        return jsonify({"error": "Internal server error"}), 500


@reservations_bp.delete("/<reservation_id>")
@require_auth
def delete_reservation_route(reservation_id: str):
    try:
        reservation_service.delete_reservation(reservation_id)
        return jsonify({"message": "Reservation deleted"}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except InvalidStateError as e:
        return jsonify({"error": str(e)}), 409
    except Exception:
        current_app.logger.exception("Failed to delete reservation")
        return jsonify({"error": "Internal server error"}), 500


@reservations_bp.patch("/<reservation_id>/status")
@require_auth
def set_status_route(reservation_id: str):
    """Request body: {"status": "completed" | "cancelled"}"""
    data = request.get_json(silent=True) or {}
    status = data.get("status")
    if not status:
        return jsonify({"error": "status is required"}), 400
    try:
        reservation = reservation_service.set_status(reservation_id, status)
        return jsonify({"reservation": reservation.to_dict()}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except InvalidStateError as e:
        return jsonify({"error": str(e)}), 409
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to change reservation status")
        return jsonify({"error": "Internal server error"}), 500


@reservations_bp.post("/<reservation_id>/cancel")
@require_auth
def cancel_reservation_route(reservation_id: str):
    try:
        reservation = reservation_service.cancel_reservation(reservation_id)
        return jsonify({"reservation": reservation.to_dict()}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except InvalidStateError as e:
        return jsonify({"error": str(e)}), 409
    except Exception:
        current_app.logger.exception("Failed to cancel reservation")
        return jsonify({"error": "Internal server error"}), 500


@reservations_bp.post("/<reservation_id>/start")
@require_auth
def start_reservation_route(reservation_id: str):
    """Request body: {"seat_id": 1}"""
    data = request.get_json(silent=True) or {}
    seat_id = data.get("seat_id")
    if isinstance(seat_id, bool) or not isinstance(seat_id, int):
        return jsonify({"error": "seat_id is required"}), 400
    try:
        seat = seat_service.start_reservation(reservation_id, seat_id)
        reservation = reservation_service.get_reservation(reservation_id)
        return jsonify({"seat": seat.to_dict(), "reservation": reservation.to_dict()}), 201
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except InvalidStateError as e:
        return jsonify({"error": str(e)}), 409
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to start reservation")
        return jsonify({"error": "Internal server error"}), 500
