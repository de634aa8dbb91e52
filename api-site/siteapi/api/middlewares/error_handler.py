# siteapi/api/middlewares/error_handler.py
import logging

from flask import Flask, jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from siteapi.api.deps import get_settings
from siteapi.api.responses import error_body
from siteapi.core.exceptions import AppError, TooManyRequestsError, ValidationFailedError

logger = logging.getLogger(__name__)


def validation_errors_map(err: ValidationError) -> dict[str, list[str]]:
    # campo -> mensagens, no formato que o front já espera
    errors: dict[str, list[str]] = {}
    for item in err.errors():
        field = ".".join(str(p) for p in item.get("loc", ())) or "body"
        errors.setdefault(field, []).append(item.get("msg", "Invalid value"))
    return errors


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        errors = err.errors if isinstance(err, ValidationFailedError) else None
        response = jsonify(error_body(err.message, errors))
        response.status_code = err.status_code

        if isinstance(err, TooManyRequestsError):
            for name, value in err.headers.items():
                response.headers[name] = value

        return response

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return jsonify(error_body("Validation failed", validation_errors_map(err))), 422

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return jsonify(error_body(err.description or err.name)), err.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        logger.exception("Unhandled error: %s", err)

        if get_settings().debug:
            return jsonify(error_body(str(err))), 500  # mostra a msg em dev

        return jsonify(error_body("Internal server error")), 500
