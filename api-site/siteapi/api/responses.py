# siteapi/api/responses.py
from typing import Any

from flask import jsonify


def success(data: Any = None, message: str = "Success", status_code: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status_code


def created(data: Any = None, message: str = "Created successfully"):
    return success(data, message, 201)


def error_body(message: str, errors: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if errors is not None:
        body["errors"] = errors
    return body
