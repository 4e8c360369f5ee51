# Overview: Request and role decorators for API routes.

from functools import wraps
from flask import current_app, request, jsonify, g

from .services import session_service


def session_token_from_request() -> str | None:
    return request.cookies.get(current_app.config["SESSION_TOKEN_COOKIE"])


def require_auth(f):
    """
    Require an authenticated session.

    Sets the following Flask g attributes:
    - g.current_user: The authenticated User object
    - g.session_context: The full SessionContext object

    Returns 401 if the session cookie is missing, unknown, expired or revoked.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        context = session_service.validate_session(session_token_from_request())

        if not context:
            return jsonify({"error": "Authentication required"}), 401

        g.current_user = context.user
        g.session_context = context

        return f(*args, **kwargs)

    return decorated_function


def require_admin(f):
    """Require the authenticated user to have the admin role."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not hasattr(g, 'current_user'):
            return jsonify({"error": "Authentication required"}), 401
        if not g.current_user.is_admin:
            return jsonify({"error": "Admin access required"}), 403
        return f(*args, **kwargs)
    return decorated_function


def is_owner_or_admin(owner_id: str) -> bool:
    """True when the signed-in user owns the resource or is an admin."""
    return g.current_user.id == owner_id or g.current_user.is_admin
