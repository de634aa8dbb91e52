# siteapi/api/routes/health_routes.py
import logging

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from siteapi.api.deps import db_session, get_settings

logger = logging.getLogger(__name__)

# fora do prefixo da API: não passa pelo rate limit
bp_health = Blueprint("health", __name__, url_prefix="/health")


@bp_health.get("")
def health():
    return jsonify({"status": "ok", "environment": get_settings().environment}), 200


@bp_health.get("/db")
def health_db():
    try:
        with db_session() as session:
            session.execute(text("select 1"))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return jsonify({"db": "unavailable"}), 503
    return jsonify({"db": "ok"}), 200
