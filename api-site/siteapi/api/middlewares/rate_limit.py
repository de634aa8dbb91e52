# siteapi/api/middlewares/rate_limit.py

import logging
from functools import wraps
from typing import Any, Callable, TypeVar

from flask import Flask, Response, g, request

from siteapi.api.deps import build_rate_limiter, db_session, get_settings
from siteapi.core.exceptions import ForbiddenError, TooManyRequestsError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

GATE_EXEMPT_ENDPOINT_PREFIXES = ("health.",)


def rate_limit(policy: str, *, message: str = "Too many requests") -> Callable[[F], F]:
    """Política específica da rota, aplicada além do gate global."""

    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if get_settings().rate_limit_enabled:
                with db_session() as session:
                    limiter = build_rate_limiter(session, policy)
                    allowed = limiter.check(policy)
                    headers = limiter.headers(policy) if not allowed else {}

                if not allowed:
                    raise TooManyRequestsError(message, headers=headers)

            return fn(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def _gate() -> None:
    settings = get_settings()
    if not settings.rate_limit_enabled or request.method == "OPTIONS":
        return
    if request.endpoint is None or request.endpoint.startswith(GATE_EXEMPT_ENDPOINT_PREFIXES):
        return

    blocked = False
    allowed = True
    with db_session() as session:
        limiter = build_rate_limiter(session, "api")

        # IP bloqueado nem passa pela contagem
        if limiter.is_blocked():
            blocked = True
        else:
            allowed = limiter.check("api")
            g.rate_limit_headers = limiter.headers("api")

            if not allowed and settings.rate_limit_block_threshold > 0:
                # violações viram linhas de rate limit sob a chave "violation"
                violations = limiter.with_policy(max_requests=settings.rate_limit_block_threshold)
                violations.check("violation")
                if violations.remaining("violation") == 0:
                    limiter.block_ip(settings.rate_limit_block_seconds, reason="Rate limit exceeded")

    if blocked:
        raise ForbiddenError("Your IP has been temporarily blocked")
    if not allowed:
        raise TooManyRequestsError("Rate limit exceeded. Please try again later.", headers=g.rate_limit_headers)


def _apply_headers(response: Response) -> Response:
    for name, value in getattr(g, "rate_limit_headers", {}).items():
        # headers de uma política de rota (429) têm prioridade sobre os do gate
        response.headers.setdefault(name, value)
    return response


def register_rate_limit_gate(app: Flask) -> None:
    app.before_request(_gate)
    app.after_request(_apply_headers)
