# siteapi/infrastructure/database/session.py

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from siteapi.infrastructure.database.base_model import BaseModel


class Database:
    """Engine + fábrica de sessões, criado explicitamente e injetado no app."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self._engine = create_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
        )
        self._session_factory = sessionmaker(
            bind=self._engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
        )

    @contextmanager
    def session(self) -> Iterator[Session]:
        session: Session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_all(self) -> None:
        import siteapi.infrastructure.database.models  # noqa: F401

        BaseModel.metadata.create_all(bind=self._engine)

    def drop_all(self) -> None:
        import siteapi.infrastructure.database.models  # noqa: F401

        BaseModel.metadata.drop_all(bind=self._engine)

    def dispose(self) -> None:
        self._engine.dispose()
