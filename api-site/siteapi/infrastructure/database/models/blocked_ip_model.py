from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from siteapi.infrastructure.database.base_model import BaseModel


class BlockedIpModel(BaseModel):
    __tablename__ = "blocked_ips"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)

    ip_address: Mapped[str] = mapped_column(String(45), nullable=False, index=True)
    blocked_until: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    reason: Mapped[str] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
