# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes

Login issues an HttpOnly session cookie holding an opaque token; the server
keeps only its SHA-256 hash (see session_service).
"""

from datetime import timedelta

from flask import Blueprint, request, jsonify, current_app, g

from ..services import auth_service, session_service
from ..decorators import require_auth, session_token_from_request


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate with email + password and start a session.

    Request body:
    {
        "email": "kasir@pos.com",
        "password": "kasir123"
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        email = data.get("email")
        password = data.get("password")

        if not email or not password or not isinstance(email, str) or not isinstance(password, str):
            return jsonify({"error": "Email and password are required"}), 400

        user = auth_service.authenticate(email, password)
        if not user:
            return jsonify({"error": "Invalid credentials"}), 401

        lifetime = timedelta(hours=current_app.config["SESSION_ABSOLUTE_HOURS"])
        session, token = session_service.create_session(
            user_id=user.id,
            user_agent=request.headers.get("User-Agent"),
            ip_address=request.remote_addr,
            lifetime=lifetime,
        )

        response = jsonify({"user": user.to_dict()})
        response.set_cookie(
            current_app.config["SESSION_TOKEN_COOKIE"],
            token,
            max_age=int(lifetime.total_seconds()),
            httponly=True,
            secure=current_app.config["SESSION_COOKIE_SECURE_FLAG"],
            samesite="Lax",
        )
        return response, 200

    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Login failed"}), 500


@auth_bp.post("/logout")
def logout_route():
    """Revoke the current session and clear the cookie."""
    try:
        token = session_token_from_request()
        if token:
            session_service.revoke_session(token, reason="User logout")

        response = jsonify({"message": "Logged out successfully"})
        response.delete_cookie(current_app.config["SESSION_TOKEN_COOKIE"])
        return response, 200

    except Exception:
        current_app.logger.exception("Failed to logout user")
        return jsonify({"error": "Logout failed"}), 500


@auth_bp.get("/me")
@require_auth
def me_route():
    return jsonify({"user": g.current_user.to_dict()}), 200
