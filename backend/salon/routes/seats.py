# Overview: Flask API routes for seats operations; parses input and returns JSON responses.

"""
Seat / Session API Routes

WHY: The front desk drives every chair through these endpoints:
start a service, finish it (ledger + stamp), or abandon it.

DESIGN:
- Seat CRUD is limited to create + rename (seats are fixed furniture)
- Session lifecycle: available -> in_use -> available
- Rejected transitions answer 409 and leave the seat untouched
"""

from flask import Blueprint, current_app, jsonify, request

from ..decorators import require_auth
from ..services import seat_service
from ..validation import InvalidStateError, NotFoundError, ValidationError


seats_bp = Blueprint("seats", __name__, url_prefix="/api/seats")


# =============================================================================
# SEAT MANAGEMENT
# =============================================================================

@seats_bp.get("")
@seats_bp.get("/")
@require_auth
def list_seats_route():
    return jsonify({"seats": [s.to_dict() for s in seat_service.list_seats()]}), 200


@seats_bp.post("")
@seats_bp.post("/")
@require_auth
def create_seat_route():
    data = request.get_json(silent=True) or {}
    try:
        seat = seat_service.create_seat(data.get("name"))
        return jsonify({"seat": seat.to_dict()}), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create seat")
        return jsonify({"error": "Internal server error"}), 500


@seats_bp.get("/<int:seat_id>")
@require_auth
def get_seat_route(seat_id: int):
    try:
        return jsonify({"seat": seat_service.get_seat(seat_id).to_dict()}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@seats_bp.patch("/<int:seat_id>")
@require_auth
def rename_seat_route(seat_id: int):
    data = request.get_json(silent=True) or {}
    try:
        seat = seat_service.rename_seat(seat_id, data.get("name"))
        return jsonify({"seat": seat.to_dict()}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to rename seat")
        return jsonify({"error": "Internal server error"}), 500


# =============================================================================
# SESSION LIFECYCLE
# =============================================================================

@seats_bp.post("/<int:seat_id>/start")
@require_auth
def start_service_route(seat_id: int):
    """
    Start a service on an available seat.

    Request body:
    {
        "staff_id": "staff-1",
        "staff_name": "원장",               (optional, defaults to current name)
        "member_id": "...",                 (optional; guests send member_name)
        "member_name": "홍길동",
        "services": [{"name": "남자컷트", "length": null, "price": 11000}],
        "selections": [{"service_id": "cut-female", "options": ["샴푸"]}],  (alternative to services)
        "total_price": 11000,               (optional, must match the lines)
        "reservation_id": "..."             (optional)
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        seat = seat_service.start_service(
            seat_id,
            staff_id=data.get("staff_id"),
            staff_name=data.get("staff_name"),
            member_id=data.get("member_id"),
            member_name=data.get("member_name"),
            services=data.get("services"),
            selections=data.get("selections"),
            total_price=data.get("total_price"),
            reservation_id=data.get("reservation_id"),
        )
        return jsonify({"seat": seat.to_dict()}), 201
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except InvalidStateError as e:
        return jsonify({"error": str(e)}), 409
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to start service")
        return jsonify({"error": "Internal server error"}), 500


@seats_bp.post("/<int:seat_id>/complete")
@require_auth
def complete_service_route(seat_id: int):
    """
    Finish the service: ledger entry, member stamp, seat released.

    Response carries the new stamp count so the desk can announce a benefit.
    """
    try:
        result = seat_service.complete_service(seat_id)
        seat = seat_service.get_seat(seat_id)
        return jsonify({"seat": seat.to_dict(), **result.to_dict()}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except InvalidStateError as e:
        return jsonify({"error": str(e)}), 409
    except Exception:
        current_app.logger.exception("Failed to complete service")
        return jsonify({"error": "Internal server error"}), 500


@seats_bp.post("/<int:seat_id>/cancel")
@require_auth
def cancel_service_route(seat_id: int):
    try:
        seat = seat_service.cancel_service(seat_id)
        return jsonify({"seat": seat.to_dict()}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except InvalidStateError as e:
        return jsonify({"error": str(e)}), 409
    except Exception:
        current_app.logger.exception("Failed to cancel service")
        return jsonify({"error": "Internal server error"}), 500
