from flask import Blueprint, request

from siteapi.api.deps import build_auth_service, db_session
from siteapi.api.middlewares.auth_middleware import current_user, require_auth
from siteapi.api.middlewares.rate_limit import rate_limit
from siteapi.api.responses import created, success
from siteapi.api.schemas.auth_schema import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    UserResponse,
)
from siteapi.core.exceptions import BadRequestError, UnauthorizedError, ValidationFailedError

bp_auth = Blueprint("auth", __name__, url_prefix="/auth")


def _json_body() -> dict:
    return request.get_json(silent=True) or {}


# As falhas de autenticação são levantadas fora do "with" para que o
# registro de auditoria (LOGIN_FAILED etc.) seja commitado.


@bp_auth.post("/login")
@rate_limit("login", message="Too many login attempts. Please try again later.")
def login():
    payload = LoginRequest.model_validate(_json_body())

    with db_session() as session:
        result = build_auth_service(session).login(payload.email, payload.password)

    if result is None:
        raise UnauthorizedError("Invalid email or password")

    return success(AuthResponse.from_result(result).model_dump(mode="json"), "Login successful")


@bp_auth.post("/register")
@rate_limit("register", message="Too many registration attempts. Please try again later.")
def register():
    payload = RegisterRequest.model_validate(_json_body())
    if payload.password != payload.password_confirmation:
        raise ValidationFailedError(errors={"password_confirmation": ["Passwords do not match"]})

    with db_session() as session:
        result = build_auth_service(session).register(
            email=payload.email,
            password=payload.password,
            full_name=payload.full_name,
        )

    return created(AuthResponse.from_result(result).model_dump(mode="json"), "Registration successful")


@bp_auth.post("/refresh")
def refresh():
    payload = RefreshRequest.model_validate(_json_body())
    if not payload.refresh_token:
        raise BadRequestError("Refresh token is required")

    with db_session() as session:
        result = build_auth_service(session).refresh(payload.refresh_token)

    if result is None:
        raise UnauthorizedError("Invalid or expired refresh token")

    return success(AuthResponse.from_result(result).model_dump(mode="json"), "Token refreshed successfully")


@bp_auth.post("/logout")
@require_auth
def logout():
    with db_session() as session:
        build_auth_service(session).logout(current_user())

    return success(None, "Logged out successfully")


@bp_auth.get("/me")
@require_auth
def me():
    return success(UserResponse.from_entity(current_user()).model_dump(mode="json"))


@bp_auth.post("/password")
@require_auth
def change_password():
    payload = ChangePasswordRequest.model_validate(_json_body())
    if payload.password != payload.password_confirmation:
        raise ValidationFailedError(errors={"password_confirmation": ["Passwords do not match"]})

    with db_session() as session:
        changed = build_auth_service(session).change_password(
            current_user(),
            current_password=payload.current_password,
            new_password=payload.password,
        )

    if not changed:
        raise UnauthorizedError("Current password is incorrect")

    # todos os refresh tokens foram revogados; o cliente precisa logar de novo
    return success(None, "Password changed successfully")
