# Overview: Flask API routes for shifts operations; parses input and returns JSON responses.

"""
Shift API Routes

Shift lifecycle: open -> close (immutable once closed). Every route acts on
the signed-in cashier's own shifts.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..errors import PosError
from ..services import shift_service
from ..decorators import require_auth, is_owner_or_admin


shifts_bp = Blueprint("shifts", __name__, url_prefix="/api/shifts")


@shifts_bp.get("/active")
@require_auth
def active_shift_route():
    """The caller's open shift, or null."""
    shift = shift_service.get_active_shift(g.current_user.id)
    return jsonify(shift.to_dict() if shift else None), 200


@shifts_bp.get("")
@require_auth
def list_shifts_route():
    shifts = shift_service.list_user_shifts(g.current_user.id)
    return jsonify([s.to_dict() for s in shifts]), 200


@shifts_bp.post("")
@require_auth
def open_shift_route():
    """
    Open a new shift for the caller.

    Request body:
    {
        "startCash": "100.00"
    }

    Returns 400 if the caller already has an open shift.
    """
    data = request.get_json(silent=True) or {}

    try:
        shift = shift_service.open_shift(g.current_user.id, data.get("startCash"))
    except PosError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to open shift")
        return jsonify({"error": "Failed to open shift"}), 500

    return jsonify(shift.to_dict()), 201


@shifts_bp.post("/<shift_id>/close")
@require_auth
def close_shift_route(shift_id: str):
    """
    Close the caller's shift.

    Request body:
    {
        "endCash": "250.00"
    }
    """
    data = request.get_json(silent=True) or {}

    try:
        shift = shift_service.close_shift(shift_id, data.get("endCash"), g.current_user.id)
    except PosError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to close shift")
        return jsonify({"error": "Failed to close shift"}), 500

    return jsonify(shift.to_dict()), 200


@shifts_bp.get("/<shift_id>/summary")
@require_auth
def shift_summary_route(shift_id: str):
    """Shift report with expected cash and variance."""
    shift = shift_service.get_shift(shift_id)
    if not shift:
        return jsonify({"error": "Shift not found"}), 404
    if not is_owner_or_admin(shift.user_id):
        return jsonify({"error": "You can only view your own shifts"}), 403

    return jsonify(shift_service.shift_summary(shift_id)), 200
