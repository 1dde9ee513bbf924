# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import atexit

from flask import Flask
from flask_cors import CORS

from realityshift.infrastructure.container import Container
from realityshift.infrastructure.db.seed import seed_reference_data
from realityshift.infrastructure.db.session import Database
from realityshift.shared.config import AppConfig, load_config
from realityshift.shared.logging import logger, setup_logging
from realityshift.shared.middleware.error_handler import configure_error_handling
from realityshift.shared.middleware.request_logger import configure_request_logging


def _configure_security_headers(app: Flask, *, enable_hsts: bool) -> None:
    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")

        resp.headers.setdefault("Referrer-Policy", "no-referrer")

        resp.headers.setdefault("X-Content-Type-Options", "nosniff")

        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")

        # Microphone stays allowed for voice logging and the diary
        resp.headers.setdefault(
            "Permissions-Policy",
            "geolocation=(), camera=(), payment=(), usb=(), magnetometer=(), gyroscope=()",
        )

        resp.headers.setdefault("X-Permitted-Cross-Domain-Policies", "none")

        if enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp


def create_app(config: AppConfig | None = None) -> Flask:
    config = config or load_config()
    setup_logging(debug_mode=config.debug_logging)
    for warning in config.production_warnings():
        logger.warning(f"config: {warning}")

    database = Database(config.database)
    database.create_all()
    if config.seed_reference_data:
        seed_reference_data(database)

    app = Flask(__name__)
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)

    security = config.security
    app.config.update(
        SECRET_KEY=security.session_secret,
        RATE_LIMIT_ENABLED=security.enable_rate_limit,
        RATE_LIMIT_REQUESTS=security.rate_limit_requests,
        RATE_LIMIT_WINDOW=security.rate_limit_window,
    )

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": security.allowed_origins}}
    }
    if any(o != "*" for o in security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    container = Container(config, database)
    app.extensions["realityshift"] = container
    for controller in container.controllers():
        app.register_blueprint(controller.as_blueprint())

    _configure_security_headers(app, enable_hsts=security.enable_hsts)
    atexit.register(database.dispose)

    logger.info(f"Flask app initialized (env={config.app_env})")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
