from __future__ import annotations

from functools import wraps

from flask import current_app, g, jsonify, session

from ..core.enums import Role

EXTENSION_KEY = "edumanage"


def login_required(view):
    """Resolve the session's user into ``g.user`` or answer 401."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        container = current_app.extensions[EXTENSION_KEY]
        user = container.auth_service.current_user(session)
        if user is None:
            return jsonify({"message": "Unauthorized"}), 401
        g.user = user
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {Role(r) for r in roles}

    def decorator(view):
        @login_required
        @wraps(view)
        def wrapper(*args, **kwargs):
            if g.user.role not in allowed:
                return jsonify({"message": "Forbidden"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator
