from functools import wraps
from typing import Any, Callable, TypeVar

from flask import g, request

from siteapi.api.deps import build_auth_service, db_session
from siteapi.core.exceptions import ForbiddenError, UnauthorizedError
from siteapi.entities.user import User

F = TypeVar("F", bound=Callable[..., Any])


def current_user() -> User:
    user = getattr(g, "current_user", None)
    if user is None:
        raise UnauthorizedError("Not authenticated")
    return user


def require_auth(fn: F) -> F:
    @wraps(fn)
    def wrapper(*args, **kwargs):
        with db_session() as session:
            user = build_auth_service(session).authenticate_request(request.headers, request.args)

        # mesma resposta para token ausente, inválido, expirado ou conta desativada
        if user is None:
            raise UnauthorizedError("Not authenticated")

        g.current_user = user
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_roles(*allowed_roles: str):
    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = current_user()

            if not any(user.has_role(role) for role in allowed_roles):
                raise ForbiddenError("Insufficient permissions")

            return fn(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
