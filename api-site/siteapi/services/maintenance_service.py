# siteapi/services/maintenance_service.py

import logging
from dataclasses import dataclass
from datetime import timedelta

from siteapi.core.clock import Clock, utcnow
from siteapi.repositories.blocked_ip_repository import BlockedIpRepository
from siteapi.repositories.rate_limit_repository import RateLimitRepository
from siteapi.repositories.refresh_token_repository import RefreshTokenRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurgeReport:
    rate_limits: int
    blocked_ips: int
    refresh_tokens: int


class MaintenanceService:
    """
    Limpeza periódica de linhas mortas.

    O rate limiter só apaga linhas do identificador que está sendo checado;
    identificadores que nunca mais aparecem ficam para este sweep.
    """

    def __init__(
        self,
        *,
        rate_limits: RateLimitRepository,
        blocked_ips: BlockedIpRepository,
        refresh_tokens: RefreshTokenRepository,
        max_window_seconds: int,
        refresh_retention_days: int = 30,
        clock: Clock = utcnow,
    ) -> None:
        self._rate_limits = rate_limits
        self._blocked_ips = blocked_ips
        self._refresh_tokens = refresh_tokens
        self._max_window = max_window_seconds
        self._retention = timedelta(days=refresh_retention_days)
        self._clock = clock

    def purge_expired(self) -> PurgeReport:
        now = self._clock()

        report = PurgeReport(
            rate_limits=self._rate_limits.purge_before(before=now - timedelta(seconds=self._max_window)),
            blocked_ips=self._blocked_ips.purge_expired(now=now),
            refresh_tokens=self._refresh_tokens.delete_dead(
                expired_before=now - self._retention,
                revoked_before=now - self._retention,
            ),
        )
        logger.info(
            "Purge done rate_limits=%s blocked_ips=%s refresh_tokens=%s",
            report.rate_limits,
            report.blocked_ips,
            report.refresh_tokens,
        )
        return report
