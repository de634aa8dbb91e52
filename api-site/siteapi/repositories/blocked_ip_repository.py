# siteapi/repositories/blocked_ip_repository.py

from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.orm import Session

from siteapi.core.base_repository import BaseRepository
from siteapi.infrastructure.database.models.blocked_ip_model import BlockedIpModel


class BlockedIpRepository(BaseRepository[BlockedIpModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def is_blocked(self, *, ip_address: str, now: datetime) -> bool:
        return self._count(
            BlockedIpModel.id,
            BlockedIpModel.ip_address == ip_address,
            BlockedIpModel.blocked_until > now,
        ) > 0

    def block(self, *, ip_address: str, blocked_until: datetime, reason: str | None, now: datetime) -> BlockedIpModel:
        return self.add(
            BlockedIpModel(
                ip_address=ip_address,
                blocked_until=blocked_until,
                reason=reason,
                created_at=now,
            )
        )

    def unblock(self, *, ip_address: str) -> int:
        stmt = delete(BlockedIpModel).where(BlockedIpModel.ip_address == ip_address)
        return self._affected(stmt)

    def purge_expired(self, *, now: datetime) -> int:
        stmt = delete(BlockedIpModel).where(BlockedIpModel.blocked_until <= now)
        return self._affected(stmt)
