# siteapi/repositories/rate_limit_repository.py

from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from siteapi.core.base_repository import BaseRepository
from siteapi.infrastructure.database.models.rate_limit_model import RateLimitModel


class RateLimitRepository(BaseRepository[RateLimitModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def record(self, *, identifier: str, ip_address: str, now: datetime) -> RateLimitModel:
        return self.add(RateLimitModel(identifier=identifier, ip_address=ip_address, created_at=now))

    def count_since(self, *, identifier: str, since: datetime) -> int:
        return self._count(
            RateLimitModel.id,
            RateLimitModel.identifier == identifier,
            RateLimitModel.created_at > since,
        )

    def oldest_since(self, *, identifier: str, since: datetime) -> datetime | None:
        stmt = select(func.min(RateLimitModel.created_at)).where(
            RateLimitModel.identifier == identifier,
            RateLimitModel.created_at > since,
        )
        return self._session.execute(stmt).scalar_one_or_none()

    def delete_before(self, *, identifier: str, before: datetime) -> int:
        stmt = delete(RateLimitModel).where(
            RateLimitModel.identifier == identifier,
            RateLimitModel.created_at < before,
        )
        return self._affected(stmt)

    def purge_before(self, *, before: datetime) -> int:
        stmt = delete(RateLimitModel).where(RateLimitModel.created_at < before)
        return self._affected(stmt)
