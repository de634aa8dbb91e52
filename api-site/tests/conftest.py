from datetime import timedelta

import pytest

from siteapi.config.settings import Settings
from siteapi.core.clock import utcnow
from siteapi.infrastructure.database.session import Database
from siteapi.infrastructure.security.jwt_provider import JwtProvider
from siteapi.main import create_app

TEST_SECRET = "test-secret-key"


class FakeClock:
    """Relógio controlável; começa no horário real para não brigar com o exp do JWT."""

    def __init__(self):
        self.now = utcnow()

    def __call__(self):
        return self.now

    def advance(self, seconds: int) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        _env_file=None,
        db_url=f"sqlite:///{tmp_path / 'site_test.db'}",
        jwt_secret=TEST_SECRET,
        app_prefix="",
        cors_origins="*",
        debug=False,
        log_level="WARNING",
        password_iterations=1_000,
        rate_limit_enabled=True,
        rate_limit_requests=100,
        rate_limit_window=3600,
        login_rate_limit_requests=5,
        login_rate_limit_window=300,
        register_rate_limit_requests=3,
        register_rate_limit_window=3600,
        rate_limit_block_threshold=0,
        trust_proxy_headers=True,
    )


@pytest.fixture()
def database(settings):
    db = Database(settings.database_url)
    db.create_all()
    yield db
    db.drop_all()
    db.dispose()


@pytest.fixture()
def jwt_provider(settings):
    return JwtProvider.from_settings(settings)


@pytest.fixture()
def app(settings, database, clock):
    app = create_app(settings, database=database, clock=clock)
    app.config["TESTING"] = True
    return app


@pytest.fixture()
def client(app):
    return app.test_client()
