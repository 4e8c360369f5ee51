# Overview: Flask API routes for categories operations; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..errors import PosError
from ..services import catalog_service
from ..decorators import require_auth, require_admin

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@categories_bp.get("")
@require_auth
def list_categories_route():
    categories = catalog_service.list_categories()
    return jsonify([c.to_dict() for c in categories]), 200


@categories_bp.post("")
@require_auth
@require_admin
def create_category_route():
    """
    Create a category.

    Request body: {"name": "Coffee"}

    Returns 409 if a category with the same (case-sensitive) name exists.
    """
    data = request.get_json(silent=True) or {}

    try:
        category = catalog_service.create_category(data.get("name"))
    except PosError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to create category")
        return jsonify({"error": "Failed to create category"}), 500

    return jsonify(category.to_dict()), 201


@categories_bp.delete("/<category_id>")
@require_auth
@require_admin
def delete_category_route(category_id: str):
    """Returns 409 while any product still uses the category name."""
    try:
        catalog_service.delete_category(category_id)
    except PosError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to delete category")
        return jsonify({"error": "Failed to delete category"}), 500

    return "", 204
