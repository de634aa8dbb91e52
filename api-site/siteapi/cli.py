# siteapi/cli.py
import click
from flask import Flask

from siteapi.api.deps import (
    build_audit,
    build_refresh_tokens,
    db_session,
    get_clock,
    get_database,
    get_jwt_provider,
    get_settings,
)
from siteapi.infrastructure.database.models.user_role_model import ROLE_ADMIN
from siteapi.repositories.blocked_ip_repository import BlockedIpRepository
from siteapi.repositories.rate_limit_repository import RateLimitRepository
from siteapi.repositories.refresh_token_repository import RefreshTokenRepository
from siteapi.repositories.user_repository import UserRepository
from siteapi.services.auth_service import AuthService, normalize_email
from siteapi.services.maintenance_service import MaintenanceService
from siteapi.services.user_service import UserService


def register_cli(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db():
        """Cria as tabelas que ainda não existem."""
        get_database().create_all()
        click.echo("Database schema created.")

    @app.cli.command("purge-expired")
    def purge_expired():
        """Remove linhas de rate limit, bloqueios e refresh tokens mortos."""
        settings = get_settings()
        max_window = max(window for _, window in settings.rate_limit_policies.values())

        with db_session() as session:
            report = MaintenanceService(
                rate_limits=RateLimitRepository(session),
                blocked_ips=BlockedIpRepository(session),
                refresh_tokens=RefreshTokenRepository(session),
                max_window_seconds=max_window,
                refresh_retention_days=settings.refresh_token_retention_days,
                clock=get_clock(),
            ).purge_expired()

        click.echo(
            f"Purged rate_limits={report.rate_limits} "
            f"blocked_ips={report.blocked_ips} refresh_tokens={report.refresh_tokens}"
        )

    @app.cli.command("create-admin")
    @click.argument("email")
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    @click.option("--full-name", default=None)
    def create_admin(email: str, password: str, full_name: str | None):
        """Cria (ou promove) uma conta com role admin."""
        email = normalize_email(email)

        with db_session() as session:
            users = UserRepository(session)
            existing = users.get_by_email(email)

            if existing is None:
                auth = AuthService(
                    user_repository=users,
                    refresh_tokens=build_refresh_tokens(session),
                    jwt_provider=get_jwt_provider(),
                    audit=build_audit(session),
                    password_iterations=get_settings().password_iterations,
                    clock=get_clock(),
                )
                user_id = auth.register(email=email, password=password, full_name=full_name).user.id
            else:
                user_id = existing.id

            UserService(users, refresh_tokens=build_refresh_tokens(session), clock=get_clock()).set_role(
                user_id=user_id, role=ROLE_ADMIN
            )

        click.echo(f"{email} is now an admin.")
