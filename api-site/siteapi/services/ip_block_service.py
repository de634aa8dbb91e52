# siteapi/services/ip_block_service.py

import logging
from datetime import timedelta

from siteapi.core.clock import Clock, utcnow
from siteapi.core.exceptions import BadRequestError
from siteapi.core.request_utils import is_public_ip
from siteapi.infrastructure.database.models.blocked_ip_model import BlockedIpModel
from siteapi.repositories.blocked_ip_repository import BlockedIpRepository

logger = logging.getLogger(__name__)


class IpBlockService:
    """Bloqueio manual de IPs pelo admin; o gate da API só consulta a tabela."""

    def __init__(self, repo: BlockedIpRepository, *, clock: Clock = utcnow) -> None:
        self._repo = repo
        self._clock = clock

    def block(self, *, ip_address: str, duration_seconds: int, reason: str | None = None) -> BlockedIpModel:
        if not is_public_ip(ip_address):
            raise BadRequestError("Only public IP addresses can be blocked")

        now = self._clock()
        model = self._repo.block(
            ip_address=ip_address,
            blocked_until=now + timedelta(seconds=duration_seconds),
            reason=reason or "Blocked by administrator",
            now=now,
        )
        logger.warning("IP blocked by admin ip=%s seconds=%s", ip_address, duration_seconds)
        return model

    def unblock(self, *, ip_address: str) -> int:
        removed = self._repo.unblock(ip_address=ip_address)
        logger.info("IP unblocked ip=%s entries=%s", ip_address, removed)
        return removed
