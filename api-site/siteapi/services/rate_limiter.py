# siteapi/services/rate_limiter.py

import hashlib
import logging
from datetime import timedelta

from siteapi.core.clock import Clock, to_epoch, utcnow
from siteapi.repositories.blocked_ip_repository import BlockedIpRepository
from siteapi.repositories.rate_limit_repository import RateLimitRepository

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Janela deslizante por identificador (hash de IP + chave da ação).

    Cada check apaga as linhas antigas do identificador, conta as que estão
    dentro da janela e registra a requisição se ainda houver cota. A política
    (max_requests, window_seconds) é definida por quem chama.
    """

    def __init__(
        self,
        *,
        repo: RateLimitRepository,
        blocked_repo: BlockedIpRepository,
        client_ip: str,
        max_requests: int,
        window_seconds: int,
        clock: Clock = utcnow,
    ) -> None:
        if max_requests < 1 or window_seconds < 1:
            raise ValueError("max_requests and window_seconds must be positive.")
        self._repo = repo
        self._blocked = blocked_repo
        self._client_ip = client_ip
        self._max = max_requests
        self._window = window_seconds
        self._clock = clock

    @property
    def client_ip(self) -> str:
        return self._client_ip

    @property
    def max_requests(self) -> int:
        return self._max

    @property
    def window_seconds(self) -> int:
        return self._window

    def with_policy(self, *, max_requests: int, window_seconds: int | None = None) -> "RateLimiter":
        return RateLimiter(
            repo=self._repo,
            blocked_repo=self._blocked,
            client_ip=self._client_ip,
            max_requests=max_requests,
            window_seconds=window_seconds or self._window,
            clock=self._clock,
        )

    def identifier(self, key: str) -> str:
        return hashlib.sha256(f"{self._client_ip}:{key}".encode("utf-8")).hexdigest()

    def check(self, key: str = "default") -> bool:
        identifier = self.identifier(key)
        now = self._clock()
        window_start = now - timedelta(seconds=self._window)

        self._repo.delete_before(identifier=identifier, before=window_start)

        count = self._repo.count_since(identifier=identifier, since=window_start)
        if count >= self._max:
            logger.info("Rate limit hit ip=%s key=%s count=%s max=%s", self._client_ip, key, count, self._max)
            return False

        self._repo.record(identifier=identifier, ip_address=self._client_ip, now=now)
        return True

    def remaining(self, key: str = "default") -> int:
        now = self._clock()
        count = self._repo.count_since(
            identifier=self.identifier(key),
            since=now - timedelta(seconds=self._window),
        )
        return max(0, self._max - count)

    def reset_time(self, key: str = "default") -> int:
        now = self._clock()
        oldest = self._repo.oldest_since(
            identifier=self.identifier(key),
            since=now - timedelta(seconds=self._window),
        )
        if oldest is not None:
            return to_epoch(oldest) + self._window
        return to_epoch(now) + self._window

    def headers(self, key: str = "default") -> dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self._max),
            "X-RateLimit-Remaining": str(self.remaining(key)),
            "X-RateLimit-Reset": str(self.reset_time(key)),
        }

    # -------------------------
    # Bloqueio de IP
    # -------------------------

    def is_blocked(self) -> bool:
        return self._blocked.is_blocked(ip_address=self._client_ip, now=self._clock())

    def block_ip(self, duration_seconds: int = 3600, reason: str = "Rate limit exceeded") -> None:
        now = self._clock()
        self._blocked.block(
            ip_address=self._client_ip,
            blocked_until=now + timedelta(seconds=duration_seconds),
            reason=reason,
            now=now,
        )
        logger.warning("IP blocked ip=%s seconds=%s reason=%s", self._client_ip, duration_seconds, reason)
