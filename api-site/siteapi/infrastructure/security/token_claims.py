# siteapi/infrastructure/security/token_claims.py

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _Claims(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    sub: str = Field(min_length=1)
    iat: int
    exp: int
    jti: str = Field(min_length=1)


class AccessClaims(_Claims):
    email: str
    role: str
    type: Literal["access"] = "access"


class RefreshClaims(_Claims):
    # sem default: token sem "type" não é refresh
    type: Literal["refresh"]
