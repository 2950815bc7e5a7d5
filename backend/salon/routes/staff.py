# Overview: Flask API routes for staff operations; parses input and returns JSON responses.

from flask import Blueprint, current_app, jsonify, request

from ..decorators import require_auth
from ..services import staff_service
from ..validation import ConflictError, NotFoundError, ValidationError


staff_bp = Blueprint("staff", __name__, url_prefix="/api/staff")


@staff_bp.get("")
@staff_bp.get("/")
@require_auth
def list_staff_route():
    return jsonify({"staff": [s.to_dict() for s in staff_service.list_staff()]}), 200


@staff_bp.post("")
@staff_bp.post("/")
@require_auth
def create_staff_route():
    """
    Request body:
    {
        "name": "원장",
        "id": "staff-1"  (optional)
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        payload = {k: v for k, v in data.items() if k != "id"}
        staff = staff_service.create_staff(payload, staff_id=data.get("id"))
        return jsonify({"staff": staff.to_dict()}), 201
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create staff")
        return jsonify({"error": "Internal server error"}), 500


@staff_bp.get("/<staff_id>")
@require_auth
def get_staff_route(staff_id: str):
    try:
        return jsonify({"staff": staff_service.get_staff(staff_id).to_dict()}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@staff_bp.patch("/<staff_id>")
@staff_bp.put("/<staff_id>")
@require_auth
def update_staff_route(staff_id: str):
    try:
        staff = staff_service.update_staff(staff_id, request.get_json(silent=True))
        return jsonify({"staff": staff.to_dict()}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update staff")
        return jsonify({"error": "Internal server error"}), 500


@staff_bp.delete("/<staff_id>")
@require_auth
def delete_staff_route(staff_id: str):
    try:
        staff_service.delete_staff(staff_id)
        return jsonify({"message": "Staff deleted"}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to delete staff")
        return jsonify({"error": "Internal server error"}), 500
