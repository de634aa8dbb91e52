# siteapi/api/deps.py

from typing import ContextManager

from flask import current_app, g, request
from sqlalchemy.orm import Session

from siteapi.config.settings import Settings
from siteapi.core.clock import Clock, utcnow
from siteapi.core.request_utils import resolve_client_ip
from siteapi.infrastructure.database.session import Database
from siteapi.infrastructure.security.jwt_provider import JwtProvider
from siteapi.repositories.audit_log_repository import AuditLogRepository
from siteapi.repositories.blocked_ip_repository import BlockedIpRepository
from siteapi.repositories.rate_limit_repository import RateLimitRepository
from siteapi.repositories.refresh_token_repository import RefreshTokenRepository
from siteapi.repositories.user_repository import UserRepository
from siteapi.services.audit_service import AuditService
from siteapi.services.auth_service import AuthService
from siteapi.services.rate_limiter import RateLimiter
from siteapi.services.refresh_token_service import RefreshTokenService
from siteapi.services.user_service import UserService


def get_settings() -> Settings:
    return current_app.extensions["settings"]


def get_database() -> Database:
    return current_app.extensions["database"]


def get_jwt_provider() -> JwtProvider:
    return current_app.extensions["jwt_provider"]


def get_clock() -> Clock:
    return current_app.extensions.get("clock", utcnow)


def db_session() -> ContextManager[Session]:
    return get_database().session()


def get_client_ip() -> str:
    ip = getattr(g, "client_ip", None)
    if ip is None:
        ip = resolve_client_ip(request.environ, trust_proxy_headers=get_settings().trust_proxy_headers)
        g.client_ip = ip
    return ip


def build_audit(session: Session) -> AuditService:
    return AuditService(AuditLogRepository(session), clock=get_clock())


def build_refresh_tokens(session: Session) -> RefreshTokenService:
    return RefreshTokenService(
        jwt_provider=get_jwt_provider(),
        repo=RefreshTokenRepository(session),
        clock=get_clock(),
    )


def build_auth_service(session: Session) -> AuthService:
    return AuthService(
        user_repository=UserRepository(session),
        refresh_tokens=build_refresh_tokens(session),
        jwt_provider=get_jwt_provider(),
        audit=build_audit(session),
        password_iterations=get_settings().password_iterations,
        client_ip=get_client_ip(),
        clock=get_clock(),
    )


def build_user_service(session: Session) -> UserService:
    return UserService(
        UserRepository(session),
        refresh_tokens=build_refresh_tokens(session),
        clock=get_clock(),
    )


def build_rate_limiter(session: Session, policy: str) -> RateLimiter:
    max_requests, window_seconds = get_settings().rate_limit_policies[policy]
    return RateLimiter(
        repo=RateLimitRepository(session),
        blocked_repo=BlockedIpRepository(session),
        client_ip=get_client_ip(),
        max_requests=max_requests,
        window_seconds=window_seconds,
        clock=get_clock(),
    )
