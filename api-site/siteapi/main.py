# siteapi/main.py
from __future__ import annotations

import logging

from flask import Flask
from flask_cors import CORS

from siteapi.api.middlewares.error_handler import register_error_handlers
from siteapi.api.middlewares.rate_limit import register_rate_limit_gate
from siteapi.api.middlewares.security_headers import register_security_headers
from siteapi.api.routes import register_routes
from siteapi.cli import register_cli
from siteapi.config.flask_config import configure_app
from siteapi.config.logging_config import setup_logging
from siteapi.config.settings import Settings, settings as default_settings
from siteapi.core.clock import Clock
from siteapi.infrastructure.database.session import Database
from siteapi.infrastructure.security.jwt_provider import JwtProvider

import siteapi.infrastructure.database.models  # noqa: F401

logger = logging.getLogger(__name__)

RATE_LIMIT_HEADERS = ["X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"]


def create_app(
    settings: Settings | None = None,
    *,
    database: Database | None = None,
    clock: Clock | None = None,
) -> Flask:
    if settings is None:
        settings = default_settings

    setup_logging(settings.log_level, "structured" if settings.log_format == "structured" else "dev")

    app = Flask(__name__)

    # CORS aplicado cedo (antes das rotas lidarem com OPTIONS)
    CORS(
        app,
        resources={rf"{settings.api_prefix}/*": {"origins": settings.cors_origin_list}},
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=RATE_LIMIT_HEADERS,
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    )

    configure_app(app, settings)

    app.extensions["database"] = database or Database(settings.database_url)
    app.extensions["jwt_provider"] = JwtProvider.from_settings(settings)
    if clock is not None:
        app.extensions["clock"] = clock

    register_routes(app, api_prefix=settings.api_prefix, app_prefix=settings.app_prefix.rstrip("/"))

    register_error_handlers(app)
    register_rate_limit_gate(app)
    register_security_headers(app)
    register_cli(app)

    logger.info("App created env=%s api_prefix=%s", settings.environment, settings.api_prefix)
    return app
