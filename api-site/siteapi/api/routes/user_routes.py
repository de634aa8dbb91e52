# siteapi/api/routes/user_routes.py

from flask import Blueprint, request

from siteapi.api.deps import build_audit, build_user_service, db_session, get_client_ip
from siteapi.api.middlewares.auth_middleware import current_user, require_auth, require_roles
from siteapi.api.responses import success
from siteapi.api.schemas.admin_schema import AuditEntryResponse, UserStatusRequest, UsersListResponse
from siteapi.api.schemas.auth_schema import UserResponse
from siteapi.core.exceptions import BadRequestError
from siteapi.infrastructure.database.models.user_role_model import ROLE_ADMIN
from siteapi.repositories.audit_log_repository import AuditLogRepository

bp_users = Blueprint("users", __name__, url_prefix="/users")

MAX_PAGE_SIZE = 200


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise BadRequestError(f"Query parameter '{name}' must be an integer")


# -------------------------
# ADMIN
# -------------------------

@bp_users.get("")
@require_auth
@require_roles(ROLE_ADMIN)
def list_users():
    limit = min(max(_int_arg("limit", 50), 1), MAX_PAGE_SIZE)
    offset = max(_int_arg("offset", 0), 0)
    include_inactive = request.args.get("include_inactive", "1") in ("1", "true", "True")

    with db_session() as session:
        users, total = build_user_service(session).list_users(
            limit=limit,
            offset=offset,
            include_inactive=include_inactive,
        )

    response = UsersListResponse(
        items=[UserResponse.from_entity(u) for u in users],
        total=total,
        limit=limit,
        offset=offset,
    )
    return success(response.model_dump(mode="json"))


@bp_users.patch("/<user_id>/status")
@require_auth
@require_roles(ROLE_ADMIN)
def set_user_status(user_id: str):
    payload = UserStatusRequest.model_validate(request.get_json(silent=True) or {})
    admin = current_user()

    if admin.id == user_id and not payload.is_active:
        raise BadRequestError("You cannot deactivate your own account")

    with db_session() as session:
        updated = build_user_service(session).set_active(user_id=user_id, is_active=payload.is_active)

        build_audit(session).log(
            entity_name="users",
            action_name="ACTIVATED" if payload.is_active else "DEACTIVATED",
            user_id=admin.id,
            details=f"target={user_id}",
            ip_address=get_client_ip(),
        )

    return success(UserResponse.from_entity(updated).model_dump(mode="json"), "User updated successfully")


@bp_users.get("/<user_id>/audit")
@require_auth
@require_roles(ROLE_ADMIN)
def user_audit(user_id: str):
    limit = min(max(_int_arg("limit", 50), 1), MAX_PAGE_SIZE)

    with db_session() as session:
        rows = AuditLogRepository(session).list_for_user(user_id, limit=limit)
        entries = [AuditEntryResponse.model_validate(r) for r in rows]

    return success([e.model_dump(mode="json") for e in entries])
