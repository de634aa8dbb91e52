# siteapi/api/routes/security_routes.py

from flask import Blueprint, request

from siteapi.api.deps import build_audit, db_session, get_clock, get_client_ip
from siteapi.api.middlewares.auth_middleware import current_user, require_auth, require_roles
from siteapi.api.responses import created, success
from siteapi.api.schemas.admin_schema import BlockedIpResponse, BlockIpRequest
from siteapi.core.exceptions import NotFoundError
from siteapi.infrastructure.database.models.user_role_model import ROLE_ADMIN
from siteapi.repositories.blocked_ip_repository import BlockedIpRepository
from siteapi.services.ip_block_service import IpBlockService

bp_security = Blueprint("security", __name__, url_prefix="/security")


def _build_service(session) -> IpBlockService:
    return IpBlockService(BlockedIpRepository(session), clock=get_clock())


@bp_security.post("/blocked-ips")
@require_auth
@require_roles(ROLE_ADMIN)
def block_ip():
    payload = BlockIpRequest.model_validate(request.get_json(silent=True) or {})
    ip_address = str(payload.ip_address)

    with db_session() as session:
        blocked = _build_service(session).block(
            ip_address=ip_address,
            duration_seconds=payload.duration_seconds,
            reason=payload.reason,
        )
        response = BlockedIpResponse(
            ip_address=blocked.ip_address,
            blocked_until=blocked.blocked_until,
            reason=blocked.reason,
        )

        build_audit(session).log(
            entity_name="blocked_ips",
            action_name="IP_BLOCKED",
            user_id=current_user().id,
            details=f"ip={ip_address}; seconds={payload.duration_seconds}",
            ip_address=get_client_ip(),
        )

    return created(response.model_dump(mode="json"), "IP blocked successfully")


@bp_security.delete("/blocked-ips/<ip_address>")
@require_auth
@require_roles(ROLE_ADMIN)
def unblock_ip(ip_address: str):
    with db_session() as session:
        removed = _build_service(session).unblock(ip_address=ip_address)

        if removed:
            build_audit(session).log(
                entity_name="blocked_ips",
                action_name="IP_UNBLOCKED",
                user_id=current_user().id,
                details=f"ip={ip_address}",
                ip_address=get_client_ip(),
            )

    if not removed:
        raise NotFoundError("IP is not blocked")

    return success(None, "IP unblocked successfully")
