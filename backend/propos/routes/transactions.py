# Overview: Flask API routes for transactions operations; parses input and returns JSON responses.

"""
Transaction (sale commit) API routes.

POST /api/transactions turns the submitted cart into a committed sale.
Change-due and receipt rendering stay on the client.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..errors import PosError, ValidationError
from ..services import sales_service, shift_service
from ..services.sales_service import Cart
from ..services.tax_policy import compute_tax
from ..decorators import require_auth, is_owner_or_admin

MAX_LIST_LIMIT = 500

transactions_bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")


@transactions_bp.post("")
@require_auth
def commit_sale_route():
    """
    Commit a sale.

    Request body:
    {
        "transaction": {
            "shiftId": "...",
            "subtotal": "7.00",        (optional, must match the items)
            "tax": "0.00",             (optional, computed from the tax policy if omitted)
            "total": "7.00",           (optional, must match subtotal + tax)
            "paymentMethod": "cash"
        },
        "items": [
            {"productId": "...", "productName": "Espresso", "quantity": 2, "price": "3.50", "total": "7.00"}
        ]
    }

    Returns 201 with the persisted transaction; 400 on insufficient stock,
    closed shift or invalid input; 403 for another cashier's shift; 404 for
    unknown shift or product.
    """
    data = request.get_json(silent=True) or {}

    try:
        header = data.get("transaction")
        if not isinstance(header, dict):
            raise ValidationError("transaction is required")
        shift_id = header.get("shiftId")
        if not shift_id or not isinstance(shift_id, str):
            raise ValidationError("transaction.shiftId is required")

        cart = Cart.from_items(data.get("items"))

        tax = header.get("tax")
        if tax is None and not cart.is_empty():
            tax = compute_tax(cart.subtotal())

        transaction = sales_service.commit_sale(
            shift_id=shift_id,
            user_id=g.current_user.id,
            cart=cart,
            payment_method=header.get("paymentMethod"),
            tax=tax,
            claimed_subtotal=header.get("subtotal"),
            claimed_total=header.get("total"),
        )
    except PosError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to create transaction")
        return jsonify({"error": "Failed to create transaction"}), 500

    return jsonify(transaction.to_dict(include_items=True)), 201


@transactions_bp.get("")
@require_auth
def list_transactions_route():
    """Store-wide recent sales feed for the dashboard, like /api/stats."""
    limit = request.args.get("limit", default=50, type=int)
    if limit is None or limit < 1:
        return jsonify({"error": "limit must be a positive integer"}), 400
    limit = min(limit, MAX_LIST_LIMIT)

    transactions = sales_service.list_transactions(limit)
    return jsonify([t.to_dict() for t in transactions]), 200


@transactions_bp.get("/shift/<shift_id>")
@require_auth
def list_shift_transactions_route(shift_id: str):
    """Transactions of one shift; visible to the shift owner or an admin."""
    shift = shift_service.get_shift(shift_id)
    if not shift:
        return jsonify({"error": "Shift not found"}), 404
    if not is_owner_or_admin(shift.user_id):
        return jsonify({"error": "You can only view your own shifts"}), 403

    transactions = sales_service.list_shift_transactions(shift_id)
    return jsonify([t.to_dict() for t in transactions]), 200


@transactions_bp.get("/<transaction_id>/items")
@require_auth
def transaction_items_route(transaction_id: str):
    """Line items of one transaction; visible to its cashier or an admin."""
    transaction = sales_service.get_transaction(transaction_id)
    if not transaction:
        return jsonify({"error": "Transaction not found"}), 404
    if not is_owner_or_admin(transaction.user_id):
        return jsonify({"error": "You can only view your own transactions"}), 403

    items = sales_service.get_transaction_items(transaction_id)
    return jsonify([item.to_dict() for item in items]), 200
