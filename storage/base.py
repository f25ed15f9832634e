"""
Base repository for SQL storage operations.

Provides a common session/transaction wrapper so every repository
converts database errors into StorageFailure in one place.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from core.telegram import app_logger


class StorageFailure(Exception):
    """
    Persistence-layer error (connection loss, query error).

    Distinct from "no rows": callers must not treat it as an empty
    result or as an authorization decision.
    """

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class SQLRepository:
    """
    Base class for repositories backed by an async SQLAlchemy session factory.

    Args:
        session_factory: async_sessionmaker bound to an engine

    Example:
        >>> class Things(SQLRepository):
        ...     async def count(self):
        ...         async with self.transaction("count things") as session:
        ...             return await session.scalar(select(func.count(Thing.id)))
    """

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    @asynccontextmanager
    async def transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """
        Open a session, commit on success, roll back on error.

        Args:
            operation: Human readable name used in logs and StorageFailure

        Raises:
            StorageFailure: If the database operation fails
        """
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    yield session
        except (SQLAlchemyError, OSError) as exc:
            app_logger.error(
                f"Storage operation failed: operation={operation}, error={exc}"
            )
            raise StorageFailure(operation, exc) from exc
