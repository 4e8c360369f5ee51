# Overview: Flask API routes for dashboard statistics; read-only.

from flask import Blueprint, request, jsonify

from ..services import reporting_service
from ..decorators import require_auth

MAX_STATS_DAYS = 366

stats_bp = Blueprint("stats", __name__, url_prefix="/api/stats")


@stats_bp.get("")
@require_auth
def sales_stats_route():
    """Revenue and transaction count over the last `days` days (default 7)."""
    days = request.args.get("days", default=7, type=int)
    if days is None or days < 1 or days > MAX_STATS_DAYS:
        return jsonify({"error": f"days must be between 1 and {MAX_STATS_DAYS}"}), 400
    return jsonify(reporting_service.sales_stats(days)), 200


@stats_bp.get("/weekly")
@require_auth
def weekly_sales_route():
    return jsonify(reporting_service.weekly_sales()), 200


@stats_bp.get("/categories")
@require_auth
def category_sales_route():
    return jsonify(reporting_service.category_sales()), 200
