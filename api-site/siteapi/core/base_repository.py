# siteapi/core/base_repository.py
from typing import Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.sql.expression import Executable
from sqlalchemy.orm import Session

TModel = TypeVar("TModel")


class BaseRepository(Generic[TModel]):
    """Repositórios recebem a sessão do chamador; commit/rollback ficam no db_session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, model: TModel) -> TModel:
        # flush para ids autoincrement e erros de constraint aparecerem aqui
        self._session.add(model)
        self._session.flush()
        return model

    def _affected(self, stmt: Executable) -> int:
        """Executa UPDATE/DELETE em lote e devolve quantas linhas mudaram."""
        result = self._session.execute(stmt)
        return int(result.rowcount or 0)

    def _count(self, column, *criteria) -> int:
        stmt = select(func.count(column)).where(*criteria)
        return int(self._session.execute(stmt).scalar_one())
