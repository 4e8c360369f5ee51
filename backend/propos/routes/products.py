# Overview: Flask API routes for products operations; parses input and returns JSON responses.

"""
Product management routes.

SECURITY: All routes require authentication.
- Read operations are available to every signed-in user (the checkout screen)
- Write operations require the admin role
"""
from flask import Blueprint, request, jsonify, current_app

from ..errors import PosError, ValidationError
from ..models import Product
from ..services import catalog_service
from ..validation import ModelValidationPolicy, validate_payload, enforce_rules_product
from ..decorators import require_auth, require_admin

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={"name", "category", "price", "stock", "image"},
    required_on_create={"name", "category", "price"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
def list_products_route():
    """List all products, newest first."""
    products = catalog_service.list_products()
    return jsonify([p.to_dict() for p in products]), 200


@products_bp.get("/<product_id>")
@require_auth
def get_product_route(product_id: str):
    product = catalog_service.get_product(product_id)
    if not product:
        return jsonify({"error": "Product not found"}), 404
    return jsonify(product.to_dict()), 200


@products_bp.post("")
@require_auth
@require_admin
def create_product_route():
    """
    Create a new product.

    Request body:
    {
        "name": "Espresso Intenso",
        "category": "Coffee",
        "price": "3.50",
        "stock": 45,
        "image": null
    }
    """
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
        product = catalog_service.create_product(patch=patch)
    except PosError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to create product")
        return jsonify({"error": "Failed to create product"}), 500

    return jsonify(product.to_dict()), 201


@products_bp.patch("/<product_id>")
@require_auth
@require_admin
def update_product_route(product_id: str):
    """Partial update; only the provided fields change."""
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
        enforce_rules_product(patch)
        if not patch:
            raise ValidationError("No fields to update")
        product = catalog_service.update_product(product_id=product_id, patch=patch)
    except PosError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to update product")
        return jsonify({"error": "Failed to update product"}), 500

    return jsonify(product.to_dict()), 200


@products_bp.delete("/<product_id>")
@require_auth
@require_admin
def delete_product_route(product_id: str):
    try:
        catalog_service.delete_product(product_id=product_id)
    except PosError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return jsonify({"error": "Failed to delete product"}), 500

    return "", 204
