# siteapi/services/auth_service.py

import logging
from typing import Mapping
from uuid import uuid4

from sqlalchemy.exc import IntegrityError

from siteapi.core.clock import Clock, utcnow
from siteapi.core.exceptions import ConflictError
from siteapi.core.request_utils import extract_bearer_token
from siteapi.entities.auth_result import AuthResult
from siteapi.entities.user import User
from siteapi.infrastructure.database.models.profile_model import ProfileModel
from siteapi.infrastructure.database.models.user_model import UserModel
from siteapi.infrastructure.database.models.user_role_model import ROLE_USER, UserRoleModel
from siteapi.infrastructure.security.jwt_provider import JwtProvider
from siteapi.infrastructure.security.password_hasher import PasswordHasher
from siteapi.infrastructure.security.token_claims import RefreshClaims
from siteapi.repositories.user_repository import UserRepository
from siteapi.services.audit_service import AuditService
from siteapi.services.refresh_token_service import RefreshTokenService

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """
    Login, registro, validação de bearer token, rotação de refresh token e logout.

    Resultados esperados de "não autenticado" voltam como None/False; só
    falhas de infraestrutura levantam exceção.
    """

    def __init__(
        self,
        *,
        user_repository: UserRepository,
        refresh_tokens: RefreshTokenService,
        jwt_provider: JwtProvider,
        audit: AuditService | None = None,
        password_iterations: int | None = None,
        client_ip: str | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._users = user_repository
        self._refresh = refresh_tokens
        self._jwt = jwt_provider
        self._audit = audit
        self._hasher = PasswordHasher(password_iterations)
        self._client_ip = client_ip
        self._clock = clock

    # -------------------------
    # Login / registro
    # -------------------------

    def login(self, email: str, password: str) -> AuthResult | None:
        email = normalize_email(email)
        user = self._users.get_by_email(email)

        if user is None:
            self._hasher.burn(password)
            self._log("LOGIN_FAILED", user_id=None, details=f"email={email}; reason=unknown_email")
            return None

        ok = self._hasher.verify(password, user.password_record)
        if not ok or not user.is_active:
            reason = "inactive" if ok else "bad_password"
            self._log("LOGIN_FAILED", user_id=user.id, details=f"email={email}; reason={reason}")
            return None

        user.last_login = self._clock()
        if self._hasher.needs_rehash(user.password_record):
            # hash antigo (menos rounds ou algo legado) é regravado no login
            user.password_record = self._hasher.hash(password)
        self._users.add(user)

        result, _ = self._issue_pair(user)
        self._log("LOGIN_SUCCESS", user_id=user.id)
        return result

    def register(self, *, email: str, password: str, full_name: str | None = None) -> AuthResult:
        email = normalize_email(email)
        if self._users.email_exists(email):
            raise ConflictError("Email already registered")

        now = self._clock()
        user_id = str(uuid4())
        full_name = full_name.strip() if full_name else None

        user = UserModel(
            id=user_id,
            email=email,
            full_name=full_name,
            is_active=True,
            created_at=now,
            updated_at=now,
            last_login=None,
        )
        user.password_record = self._hasher.hash(password)
        role = UserRoleModel(id=str(uuid4()), user_id=user_id, role=ROLE_USER)
        profile = ProfileModel(
            id=str(uuid4()),
            user_id=user_id,
            email=email,
            full_name=full_name,
            created_at=now,
            updated_at=now,
        )
        try:
            self._users.add_with_role(user, role, profile)
        except IntegrityError as e:
            # outro registro com o mesmo email ganhou a corrida entre o check e o insert
            raise ConflictError("Email already registered") from e
        self._log("REGISTERED", user_id=user_id, details=f"email={email}")

        result = self.login(email, password)
        if result is None:
            raise RuntimeError("Login right after registration failed.")
        return result

    # -------------------------
    # Bearer token
    # -------------------------

    def authenticate(self, token: str | None) -> User | None:
        if not token:
            return None

        claims = self._jwt.decode_access(token)
        if claims is None:
            return None

        # estado da conta é relido a cada request: desativar invalida tokens já emitidos
        user = self._users.get_active_by_id(claims.sub)
        if user is None:
            return None
        return User.from_model(user)

    def authenticate_request(self, headers: Mapping[str, str], query: Mapping[str, str] | None = None) -> User | None:
        return self.authenticate(extract_bearer_token(headers, query))

    # -------------------------
    # Refresh / logout
    # -------------------------

    def refresh(self, refresh_token: str) -> AuthResult | None:
        found = self._refresh.find_usable(refresh_token)
        if found is None:
            return None
        _, stored = found

        user = self._users.get_active_by_id(stored.user_id)
        if user is None:
            return None

        if not self._refresh.consume(stored):
            return None

        result, new_claims = self._issue_pair(user)
        self._refresh.link_replacement(stored, replaced_by_jti=new_claims.jti)
        self._log("REFRESHED", user_id=user.id)
        return result

    def logout(self, user: User | None) -> bool:
        if user is None:
            return False

        revoked = self._refresh.revoke_all(user_id=user.id, reason="logout")
        self._log("LOGOUT", user_id=user.id, details=f"revoked={revoked}")
        return True

    def change_password(self, user: User, *, current_password: str, new_password: str) -> bool:
        model = self._users.get_active_by_id(user.id)
        if model is None or not self._hasher.verify(current_password, model.password_record):
            self._log("PASSWORD_CHANGE_FAILED", user_id=user.id)
            return False

        model.password_record = self._hasher.hash(new_password)
        model.updated_at = self._clock()
        self._users.add(model)

        self._refresh.revoke_all(user_id=user.id, reason="password_changed")
        self._log("PASSWORD_CHANGED", user_id=user.id)
        return True

    # -------------------------
    # Helpers
    # -------------------------

    def _issue_pair(self, user: UserModel) -> tuple[AuthResult, RefreshClaims]:
        access = self._jwt.issue_access_token(user_id=user.id, email=user.email, role=user.role_name)
        refresh, refresh_claims = self._refresh.issue(user_id=user.id)

        result = AuthResult(
            user=User.from_model(user),
            access_token=access,
            refresh_token=refresh,
            expires_in=self._jwt.access_ttl,
        )
        return result, refresh_claims

    def _log(self, action_name: str, *, user_id: str | None, details: str | None = None) -> None:
        if self._audit is None:
            return
        self._audit.log(
            entity_name="auth",
            action_name=action_name,
            user_id=user_id,
            details=details,
            ip_address=self._client_ip,
        )
