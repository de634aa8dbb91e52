# siteapi/infrastructure/database/models/user_model.py

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from siteapi.infrastructure.database.base_model import BaseModel
from siteapi.infrastructure.security.password_hasher import PasswordHash


class UserModel(BaseModel):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(100), nullable=True)

    password_algo: Mapped[str] = mapped_column(String(50), nullable=False)
    password_iterations: Mapped[int] = mapped_column(nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    password_salt: Mapped[str] = mapped_column(Text, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=True)
    last_login: Mapped[datetime] = mapped_column(DateTime, nullable=True)

    role: Mapped["UserRoleModel"] = relationship(  # noqa: F821
        "UserRoleModel",
        uselist=False,
        lazy="joined",
        back_populates="user",
    )

    @property
    def role_name(self) -> str:
        return self.role.role if self.role is not None else "user"

    @property
    def password_record(self) -> PasswordHash:
        return PasswordHash(
            hash=self.password_hash,
            salt=self.password_salt,
            algo=self.password_algo,
            iterations=self.password_iterations,
        )

    @password_record.setter
    def password_record(self, value: PasswordHash) -> None:
        self.password_hash = value.hash
        self.password_salt = value.salt
        self.password_algo = value.algo
        self.password_iterations = value.iterations
