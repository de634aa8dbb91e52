# siteapi/services/user_service.py

from uuid import uuid4

from siteapi.core.clock import Clock, utcnow
from siteapi.core.exceptions import BadRequestError, NotFoundError
from siteapi.entities.user import User
from siteapi.infrastructure.database.models.user_role_model import ROLES, UserRoleModel
from siteapi.repositories.user_repository import UserRepository
from siteapi.services.refresh_token_service import RefreshTokenService


class UserService:
    def __init__(
        self,
        user_repository: UserRepository,
        *,
        refresh_tokens: RefreshTokenService,
        clock: Clock = utcnow,
    ) -> None:
        self._user_repository = user_repository
        self._refresh = refresh_tokens
        self._clock = clock

    def list_users(self, *, limit: int = 50, offset: int = 0, include_inactive: bool = True) -> tuple[list[User], int]:
        users = self._user_repository.list_all(limit=limit, offset=offset, include_inactive=include_inactive)
        total = self._user_repository.count_all(include_inactive=include_inactive)
        return [User.from_model(u) for u in users], total

    def set_active(self, *, user_id: str, is_active: bool) -> User:
        user = self._user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")

        user.is_active = is_active
        user.updated_at = self._clock()
        self._user_repository.add(user)

        if not is_active:
            self._refresh.revoke_all(user_id=user.id, reason="deactivated")

        return User.from_model(user)

    def set_role(self, *, user_id: str, role: str) -> User:
        if role not in ROLES:
            raise BadRequestError(f"Unknown role: {role}")

        user = self._user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")

        if user.role is None:
            # conta antiga sem linha em user_roles
            user.role = UserRoleModel(id=str(uuid4()), user_id=user.id, role=role)
        else:
            user.role.role = role
        user.updated_at = self._clock()
        self._user_repository.add(user)

        # o role está no access token; força novo login
        self._refresh.revoke_all(user_id=user.id, reason="role_changed")
        return User.from_model(user)
