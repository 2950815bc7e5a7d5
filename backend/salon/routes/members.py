# Overview: Flask API routes for members operations; parses input and returns JSON responses.

"""
Member API Routes

- CRUD for regular customers
- Exact phone lookup for the front desk
- Manual stamp operations (add one, redeem a benefit, reset)
"""

from flask import Blueprint, current_app, jsonify, request

from ..decorators import require_auth
from ..services import member_service
from ..validation import ConflictError, NotFoundError, ValidationError


members_bp = Blueprint("members", __name__, url_prefix="/api/members")


@members_bp.get("")
@members_bp.get("/")
@require_auth
def list_members_route():
    search = request.args.get("search") or request.args.get("q")
    members = member_service.list_members(search=search)
    return jsonify({"members": [member_service.serialize(m) for m in members]}), 200


@members_bp.get("/search")
@require_auth
def find_member_by_phone_route():
    phone = request.args.get("phone")
    if not phone:
        return jsonify({"error": "phone is required"}), 400
    try:
        member = member_service.find_by_phone(phone)
        return jsonify({"member": member_service.serialize(member)}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@members_bp.post("")
@members_bp.post("/")
@require_auth
def create_member_route():
    """
    Register a member.

    Request body:
    {
        "name": "홍길동",
        "phone": "010-1234-5678"
    }
    """
    try:
        member = member_service.create_member(request.get_json(silent=True))
        return jsonify({"member": member_service.serialize(member)}), 201
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create member")
        return jsonify({"error": "Internal server error"}), 500


@members_bp.get("/<member_id>")
@require_auth
def get_member_route(member_id: str):
    try:
        member = member_service.get_member(member_id)
        return jsonify({"member": member_service.serialize(member)}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@members_bp.patch("/<member_id>")
@members_bp.put("/<member_id>")
@require_auth
def update_member_route(member_id: str):
    try:
        member = member_service.update_member(member_id, request.get_json(silent=True))
        return jsonify({"member": member_service.serialize(member)}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update member")
        return jsonify({"error": "Internal server error"}), 500


@members_bp.delete("/<member_id>")
@require_auth
def delete_member_route(member_id: str):
    try:
        member_service.delete_member(member_id)
        return jsonify({"message": "Member deleted"}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to delete member")
        return jsonify({"error": "Internal server error"}), 500


# =============================================================================
# STAMPS
# =============================================================================

def _stamp_response(member_id: str, message: str):
    member = member_service.get_member(member_id)
    return jsonify({"member": member_service.serialize(member), "stamps": member.stamps, "message": message}), 200


@members_bp.post("/<member_id>/stamp")
@require_auth
def add_stamp_route(member_id: str):
    try:
        member_service.add_stamp(member_id)
        return _stamp_response(member_id, "Stamp added")
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to add stamp")
        return jsonify({"error": "Internal server error"}), 500


@members_bp.post("/<member_id>/use-stamps")
@require_auth
def use_stamps_route(member_id: str):
    try:
        member_service.use_stamps(member_id)
        return _stamp_response(member_id, "Benefit redeemed")
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to redeem stamps")
        return jsonify({"error": "Internal server error"}), 500


@members_bp.post("/<member_id>/reset-stamps")
@require_auth
def reset_stamps_route(member_id: str):
    try:
        member_service.reset_stamps(member_id)
        return _stamp_response(member_id, "Stamps reset")
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to reset stamps")
        return jsonify({"error": "Internal server error"}), 500
