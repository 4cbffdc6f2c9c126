"""Base class shared by application services."""

from __future__ import annotations

from datetime import UTC, datetime

from sessionauth.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide a helper to run a read-write unit of work.
    * Provide a single clock so time-based decisions are easy to freeze in tests.

    Notes
    -----
    - Services never touch the global session directly; they open a unit of work.
    - Services never import Flask request helpers; transport stays in ``api``.
    """

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)
