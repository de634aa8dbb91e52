# siteapi/repositories/refresh_token_repository.py

from datetime import datetime

from sqlalchemy import delete, or_, select, update
from sqlalchemy.orm import Session

from siteapi.core.base_repository import BaseRepository
from siteapi.infrastructure.database.models.refresh_token_model import RefreshTokenModel


class RefreshTokenRepository(BaseRepository[RefreshTokenModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def get_by_hash(self, token_hash: str) -> RefreshTokenModel | None:
        stmt = select(RefreshTokenModel).where(RefreshTokenModel.token_hash == token_hash)
        return self._session.execute(stmt).scalar_one_or_none()

    def revoke_if_active(self, *, token_id: int, now: datetime, reason: str | None = None) -> bool:
        # UPDATE condicional: só um chamador concorrente consegue revogar
        stmt = (
            update(RefreshTokenModel)
            .where(
                RefreshTokenModel.id == token_id,
                RefreshTokenModel.revoked.is_(False),
                RefreshTokenModel.expires_at > now,
            )
            .values(revoked=True, revoked_at=now, reason=reason)
        )
        return self._affected(stmt) == 1

    def set_replaced_by(self, *, token_id: int, replaced_by_jti: str) -> None:
        stmt = (
            update(RefreshTokenModel)
            .where(RefreshTokenModel.id == token_id)
            .values(replaced_by_jti=replaced_by_jti)
        )
        self._session.execute(stmt)

    def revoke_all_for_user(self, *, user_id: str, now: datetime, reason: str | None = None) -> int:
        stmt = (
            update(RefreshTokenModel)
            .where(RefreshTokenModel.user_id == user_id, RefreshTokenModel.revoked.is_(False))
            .values(revoked=True, revoked_at=now, reason=reason)
        )
        return self._affected(stmt)

    def delete_dead(self, *, expired_before: datetime, revoked_before: datetime) -> int:
        stmt = delete(RefreshTokenModel).where(
            or_(
                RefreshTokenModel.expires_at < expired_before,
                (RefreshTokenModel.revoked.is_(True)) & (RefreshTokenModel.revoked_at < revoked_before),
            )
        )
        return self._affected(stmt)
