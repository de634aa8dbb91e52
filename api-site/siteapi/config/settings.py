# siteapi/config/settings.py
from urllib.parse import quote_plus
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    # Banco principal
    db_url: str | None = None
    db_driver: str = "postgresql+psycopg2"
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "site"
    db_user: str = "site"
    db_password: str = ""

    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    log_format: str = "dev"

    app_prefix: str = ""
    cors_origins: str = "*"

    jwt_secret: str = "dev-secret-change-me"
    jwt_access_seconds: int = 3600
    jwt_refresh_seconds: int = 60 * 60 * 24 * 7

    password_iterations: int = 600_000

    # Rate limiting (política padrão da API + políticas por rota)
    rate_limit_enabled: bool = True
    rate_limit_requests: int = 100
    rate_limit_window: int = 3600
    login_rate_limit_requests: int = 5
    login_rate_limit_window: int = 300
    register_rate_limit_requests: int = 3
    register_rate_limit_window: int = 3600
    # bloqueia o IP quando as violações atingem este número dentro da janela; 0 desativa
    rate_limit_block_threshold: int = 0
    rate_limit_block_seconds: int = 3600
    trust_proxy_headers: bool = True

    refresh_token_retention_days: int = 30

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("db_url", "db_host", "db_name", "db_user", "db_password", "jwt_secret", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip().strip('"').strip("'")
        return v

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url

        user = quote_plus(self.db_user)
        password = quote_plus(self.db_password)
        return f"{self.db_driver}://{user}:{password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def rate_limit_policies(self) -> dict[str, tuple[int, int]]:
        # nome da política -> (max_requests, window_seconds)
        return {
            "api": (self.rate_limit_requests, self.rate_limit_window),
            "login": (self.login_rate_limit_requests, self.login_rate_limit_window),
            "register": (self.register_rate_limit_requests, self.register_rate_limit_window),
        }

    @property
    def api_prefix(self) -> str:
        return f"{self.app_prefix.rstrip('/')}/api"


settings = Settings()
