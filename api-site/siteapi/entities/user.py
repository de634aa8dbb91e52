# siteapi/entities/user.py
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class User:
    id: str
    email: str
    full_name: Optional[str]
    role: str
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime]
    last_login: Optional[datetime]

    def has_role(self, role: str) -> bool:
        return self.role == role

    @property
    def is_admin(self) -> bool:
        return self.has_role("admin")

    @classmethod
    def from_model(cls, model) -> "User":
        # nunca carrega campos de senha
        return cls(
            id=model.id,
            email=model.email,
            full_name=model.full_name,
            role=model.role_name,
            is_active=bool(model.is_active),
            created_at=model.created_at,
            updated_at=model.updated_at,
            last_login=model.last_login,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
