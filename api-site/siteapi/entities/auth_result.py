from dataclasses import dataclass

from siteapi.entities.user import User


@dataclass(frozen=True)
class AuthResult:
    user: User
    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "Bearer"
