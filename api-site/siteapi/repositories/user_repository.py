# siteapi/repositories/user_repository.py

from sqlalchemy import select
from sqlalchemy.orm import Session

from siteapi.core.base_repository import BaseRepository
from siteapi.infrastructure.database.models.profile_model import ProfileModel
from siteapi.infrastructure.database.models.user_model import UserModel
from siteapi.infrastructure.database.models.user_role_model import UserRoleModel


class UserRepository(BaseRepository[UserModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def get_by_email(self, email: str) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.email == email)
        return self._session.execute(stmt).unique().scalar_one_or_none()

    def get_by_id(self, user_id: str) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        return self._session.execute(stmt).unique().scalar_one_or_none()

    def get_active_by_id(self, user_id: str) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id, UserModel.is_active.is_(True))
        return self._session.execute(stmt).unique().scalar_one_or_none()

    def email_exists(self, email: str) -> bool:
        return self._count(UserModel.id, UserModel.email == email) > 0

    def list_all(self, *, limit: int = 50, offset: int = 0, include_inactive: bool = True) -> list[UserModel]:
        stmt = select(UserModel)
        if not include_inactive:
            stmt = stmt.where(UserModel.is_active.is_(True))

        stmt = stmt.order_by(UserModel.created_at.desc()).limit(limit).offset(offset)
        return list(self._session.execute(stmt).unique().scalars().all())

    def count_all(self, *, include_inactive: bool = True) -> int:
        criteria = [] if include_inactive else [UserModel.is_active.is_(True)]
        return self._count(UserModel.id, *criteria)

    def add_with_role(self, user: UserModel, role: UserRoleModel, profile: ProfileModel) -> UserModel:
        # commit/rollback ficam com o db_session do chamador
        self._session.add(user)
        self._session.flush()
        self._session.add(role)
        self._session.add(profile)
        self._session.flush()
        self._session.refresh(user)
        return user
