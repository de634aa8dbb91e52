# siteapi/services/audit_service.py

import logging

from siteapi.core.clock import Clock, utcnow
from siteapi.infrastructure.database.models.audit_log_model import AuditLogModel
from siteapi.repositories.audit_log_repository import AuditLogRepository

logger = logging.getLogger(__name__)


class AuditService:
    def __init__(self, repo: AuditLogRepository, *, clock: Clock = utcnow) -> None:
        self._repo = repo
        self._clock = clock

    def log(
        self,
        *,
        entity_name: str,
        action_name: str,
        user_id: str | None,
        details: str | None = None,
        ip_address: str | None = None,
    ) -> None:
        model = AuditLogModel(
            entity_name=entity_name,
            action_name=action_name,
            details=details,
            user_id=user_id,
            ip_address=ip_address,
            occurred_at=self._clock(),
        )
        self._repo.add(model)
        logger.info("audit %s.%s user=%s ip=%s %s", entity_name, action_name, user_id, ip_address, details or "")
