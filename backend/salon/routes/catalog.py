# Overview: Flask API routes for the service menu; price list and quotes.

from flask import Blueprint, jsonify, request

from ..decorators import require_auth
from ..services import catalog_service
from ..validation import NotFoundError, ValidationError


catalog_bp = Blueprint("catalog", __name__, url_prefix="/api/catalog")


@catalog_bp.get("")
@catalog_bp.get("/")
@require_auth
def list_catalog_route():
    category = request.args.get("category")
    try:
        items = catalog_service.list_menu(category)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({
        "categories": catalog_service.list_categories(),
        "items": [item.to_dict() for item in items],
    }), 200


@catalog_bp.post("/quote")
@require_auth
def quote_route():
    """
    Price a set of menu selections without starting anything.

    Request body:
    {
        "selections": [
            {"service_id": "perm-basic", "length": "medium"},
            {"service_id": "cut-female", "options": ["샴푸"]}
        ]
    }
    """
    data = request.get_json(silent=True) or {}
    selections = data.get("selections")
    if not isinstance(selections, list) or not selections:
        return jsonify({"error": "selections must be a non-empty list"}), 400
    try:
        services = catalog_service.select_services(selections)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"services": services, "total_price": catalog_service.total_of(services)}), 200
