# siteapi/repositories/audit_log_repository.py

from sqlalchemy import select
from sqlalchemy.orm import Session

from siteapi.core.base_repository import BaseRepository
from siteapi.infrastructure.database.models.audit_log_model import AuditLogModel


class AuditLogRepository(BaseRepository[AuditLogModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def list_for_user(self, user_id: str, *, limit: int = 50) -> list[AuditLogModel]:
        stmt = (
            select(AuditLogModel)
            .where(AuditLogModel.user_id == user_id)
            .order_by(AuditLogModel.occurred_at.desc(), AuditLogModel.id.desc())
            .limit(limit)
        )
        return list(self._session.execute(stmt).scalars().all())
