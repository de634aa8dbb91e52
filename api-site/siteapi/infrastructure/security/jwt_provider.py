# siteapi/infrastructure/security/jwt_provider.py

import json
import logging
import secrets
import time
from typing import Any, Mapping

import jwt
from pydantic import ValidationError

from siteapi.infrastructure.security.token_claims import AccessClaims, RefreshClaims

logger = logging.getLogger(__name__)

VERIFY_OPTIONS = {
    "verify_signature": True,
    "verify_exp": True,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
    "require": ["exp"],
}


class JwtProvider:
    """
    Emite e valida tokens compactos HS256 (header.payload.signature).

    Qualquer falha estrutural, de assinatura ou de expiração resulta em
    None, sem distinguir o motivo.
    """

    ALGORITHM = "HS256"

    def __init__(self, *, secret: str, access_ttl: int = 3600, refresh_ttl: int = 604800) -> None:
        if not secret:
            raise ValueError("JWT secret must not be empty.")
        self._secret = secret
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl

    @classmethod
    def from_settings(cls, settings) -> "JwtProvider":
        return cls(
            secret=settings.jwt_secret,
            access_ttl=settings.jwt_access_seconds,
            refresh_ttl=settings.jwt_refresh_seconds,
        )

    @property
    def access_ttl(self) -> int:
        return self._access_ttl

    @property
    def refresh_ttl(self) -> int:
        return self._refresh_ttl

    def issue(self, claims: Mapping[str, Any], ttl_seconds: int) -> str:
        now = int(time.time())

        payload = dict(claims)
        payload.update(
            {
                "iat": now,
                "exp": now + int(ttl_seconds),
                "jti": secrets.token_hex(16),
            }
        )
        # assina os bytes do JSON direto: o jwt.encode recusa sub/iss que não sejam string
        return jwt.api_jws.encode(
            json.dumps(payload, separators=(",", ":")).encode("utf-8"),
            self._secret,
            algorithm=self.ALGORITHM,
            headers={"typ": "JWT", "alg": self.ALGORITHM},
        )

    def verify(self, token: str) -> dict[str, Any] | None:
        if not token or token.count(".") != 2:
            return None
        try:
            # só assinatura e exp (rejeita exp <= agora); demais claims passam intactas
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self.ALGORITHM],
                options=VERIFY_OPTIONS,
            )
        except jwt.PyJWTError as e:
            logger.debug("Token rejected: %s", type(e).__name__)
            return None

    def issue_access_token(self, *, user_id: str, email: str, role: str) -> str:
        return self.issue(
            {"sub": str(user_id), "email": email, "role": role, "type": "access"},
            self._access_ttl,
        )

    def issue_refresh_token(self, *, user_id: str) -> str:
        return self.issue({"sub": str(user_id), "type": "refresh"}, self._refresh_ttl)

    def decode_access(self, token: str) -> AccessClaims | None:
        payload = self.verify(token)
        if payload is None:
            return None
        try:
            return AccessClaims.model_validate(payload)
        except ValidationError:
            return None

    def decode_refresh(self, token: str) -> RefreshClaims | None:
        payload = self.verify(token)
        if payload is None:
            return None
        try:
            return RefreshClaims.model_validate(payload)
        except ValidationError:
            return None
