# siteapi/services/refresh_token_service.py

import hashlib
import logging
from datetime import datetime, timezone

from siteapi.core.clock import Clock, utcnow
from siteapi.infrastructure.database.models.refresh_token_model import RefreshTokenModel
from siteapi.infrastructure.security.jwt_provider import JwtProvider
from siteapi.infrastructure.security.token_claims import RefreshClaims
from siteapi.repositories.refresh_token_repository import RefreshTokenRepository

logger = logging.getLogger(__name__)


def _sha256(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


class RefreshTokenService:
    def __init__(self, *, jwt_provider: JwtProvider, repo: RefreshTokenRepository, clock: Clock = utcnow) -> None:
        self._jwt = jwt_provider
        self._repo = repo
        self._clock = clock

    def issue(self, *, user_id: str) -> tuple[str, RefreshClaims]:
        token = self._jwt.issue_refresh_token(user_id=user_id)
        claims = self._jwt.decode_refresh(token)
        if claims is None:
            raise RuntimeError("Freshly issued refresh token failed verification.")

        expires_at = datetime.fromtimestamp(claims.exp, tz=timezone.utc).replace(tzinfo=None)
        model = RefreshTokenModel(
            user_id=user_id,
            token_hash=_sha256(token),
            jti=claims.jti,
            expires_at=expires_at,
            revoked=False,
            revoked_at=None,
            replaced_by_jti=None,
            reason=None,
            created_at=self._clock(),
        )
        self._repo.add(model)
        return token, claims

    def find_usable(self, refresh_token: str) -> tuple[RefreshClaims, RefreshTokenModel] | None:
        claims = self._jwt.decode_refresh(refresh_token)
        if claims is None:
            return None

        stored = self._repo.get_by_hash(_sha256(refresh_token))
        if stored is None:
            logger.info("Refresh token not found user=%s jti=%s", claims.sub, claims.jti)
            return None

        if stored.revoked:
            # reuso de token já rotacionado: possível roubo
            logger.warning(
                "Revoked refresh token presented again user=%s jti=%s reason=%s",
                stored.user_id,
                stored.jti,
                stored.reason,
            )
            return None

        if stored.expires_at <= self._clock():
            logger.info("Expired refresh token presented user=%s jti=%s", stored.user_id, stored.jti)
            return None

        if stored.user_id != claims.sub:
            logger.warning("Refresh token subject mismatch stored=%s claimed=%s", stored.user_id, claims.sub)
            return None

        return claims, stored

    def consume(self, stored: RefreshTokenModel) -> bool:
        ok = self._repo.revoke_if_active(token_id=stored.id, now=self._clock(), reason="rotated")
        if not ok:
            logger.warning("Refresh token lost rotation race user=%s jti=%s", stored.user_id, stored.jti)
        return ok

    def link_replacement(self, stored: RefreshTokenModel, *, replaced_by_jti: str) -> None:
        self._repo.set_replaced_by(token_id=stored.id, replaced_by_jti=replaced_by_jti)

    def revoke_all(self, *, user_id: str, reason: str) -> int:
        return self._repo.revoke_all_for_user(user_id=user_id, now=self._clock(), reason=reason)
