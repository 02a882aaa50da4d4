from __future__ import annotations

from flask import Flask, g, jsonify, request, session

from ..core.exceptions import AuthenticationError
from ..storage.mapper import USERS
from .guards import login_required


def register(app: Flask, container) -> None:
    auth = container.auth_service

    @app.post("/api/register")
    def api_register():
        draft = USERS.from_wire(request.get_json(silent=True) or {})
        creator = auth.current_user(session)
        user = auth.register(draft, created_by=creator)
        if creator is None:
            auth.login(session, user)
        return jsonify(USERS.to_wire(user)), 201

    @app.post("/api/login")
    def api_login():
        body = request.get_json(silent=True) or {}
        try:
            user = auth.authenticate(str(body.get("username") or ""), str(body.get("password") or ""))
        except AuthenticationError as e:
            return jsonify({"message": str(e)}), 401
        auth.login(session, user)
        return jsonify(USERS.to_wire(user)), 200

    @app.post("/api/logout")
    @login_required
    def api_logout():
        auth.logout(session)
        return "", 200

    @app.get("/api/user")
    @login_required
    def api_current_user():
        return jsonify(USERS.to_wire(g.user))
