# siteapi/api/schemas/admin_schema.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, IPvAnyAddress

from siteapi.api.schemas.auth_schema import UserResponse


class UserStatusRequest(BaseModel):
    is_active: bool


class UsersListResponse(BaseModel):
    items: list[UserResponse]
    total: int
    limit: int
    offset: int


class BlockIpRequest(BaseModel):
    ip_address: IPvAnyAddress
    duration_seconds: int = Field(default=3600, gt=0, le=60 * 60 * 24 * 30)
    reason: str | None = Field(default=None, max_length=255)


class BlockedIpResponse(BaseModel):
    ip_address: str
    blocked_until: datetime
    reason: str | None = None


class AuditEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    entity_name: str
    action_name: str
    details: str | None = None
    user_id: str | None = None
    ip_address: str | None = None
    occurred_at: datetime
