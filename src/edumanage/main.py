from __future__ import annotations

import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from .academics.controller import register as register_academics
from .auth.controller import register as register_auth
from .auth.guards import EXTENSION_KEY
from .auth.sessions import StoreSessionInterface
from .config import AppConfig, get_settings_module, load_config
from .container import Container, build_container
from .core.constants import SESSION_COOKIE_NAME
from .core.exceptions import AuthenticationError, AuthorizationError, PersistenceError, ValidationError
from .finance.controller import register as register_finance
from .publications.controller import register as register_publications
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return jsonify({"message": str(e)}), 400

    @app.errorhandler(AuthenticationError)
    def _unauthorized(e: AuthenticationError):
        return jsonify({"message": str(e) or "Unauthorized"}), 401

    @app.errorhandler(AuthorizationError)
    def _forbidden(e: AuthorizationError):
        return jsonify({"message": str(e) or "Forbidden"}), 403

    @app.errorhandler(PersistenceError)
    def _persistence(e: PersistenceError):
        logger.error("Storage failure during %s: %s", e.operation or "request", e.message)
        return jsonify({"message": e.message}), 500


def create_app(config: Optional[AppConfig] = None, *, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    if config is None:
        config = container.config if container is not None else load_config()

    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)
    logger.info("Starting EduManage (settings=%s, storage=%s)", get_settings_module(), config.storage_backend.value)

    app = Flask(__name__)
    app.secret_key = config.secret_key
    app.config["DEBUG"] = config.debug
    app.config["TESTING"] = config.testing
    app.config["SESSION_COOKIE_NAME"] = SESSION_COOKIE_NAME
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"

    if container is None:
        container = build_container(config)
    app.extensions[EXTENSION_KEY] = container
    app.session_interface = StoreSessionInterface(container.sessions, ttl_seconds=config.session_ttl_seconds)

    register_error_handlers(app)
    register_auth(app, container)
    register_users(app, container)
    register_academics(app, container)
    register_finance(app, container)
    register_publications(app, container)

    return app
