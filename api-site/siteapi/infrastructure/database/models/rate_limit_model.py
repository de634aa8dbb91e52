# siteapi/infrastructure/database/models/rate_limit_model.py

from datetime import datetime

from sqlalchemy import BigInteger, CHAR, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from siteapi.infrastructure.database.base_model import BaseModel


class RateLimitModel(BaseModel):
    __tablename__ = "rate_limits"
    __table_args__ = (Index("ix_rate_limits_identifier_created_at", "identifier", "created_at"),)

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)

    identifier: Mapped[str] = mapped_column(CHAR(64), nullable=False)
    ip_address: Mapped[str] = mapped_column(String(45), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
