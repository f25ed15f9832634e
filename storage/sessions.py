"""
Authorization grant storage (auth_sessions table).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from core.database import SessionLocal
from storage.base import SQLRepository
from storage.models import AuthSession

_UPSERT_BUILDERS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


@dataclass(frozen=True)
class Grant:
    """Stored authorization for a non-admin user"""
    user_id: int
    granted_by: Optional[int]
    expires_at: Optional[datetime]
    permanent: bool

    @classmethod
    def from_row(cls, row: AuthSession) -> "Grant":
        return cls(
            user_id=row.user_id,
            granted_by=row.authorized_by,
            expires_at=row.expires_at,
            permanent=bool(row.is_permanent),
        )

    def is_expired(self, now: datetime) -> bool:
        if self.permanent:
            return False
        # A time-boxed grant without expiry is unusable
        if self.expires_at is None:
            return True
        return now > self.expires_at


class SessionStore(SQLRepository):
    """
    Key-value persistence of grants keyed by user id.

    All methods raise StorageFailure on database errors.
    """

    async def upsert(self, user_id: int, granted_by: int, expires_at: Optional[datetime], permanent: bool) -> None:
        """Insert or replace the grant for user_id in a single statement"""
        if not permanent and expires_at is None:
            raise ValueError("time-boxed grant requires expires_at")

        values = {
            "user_id": user_id,
            "authorized_by": granted_by,
            "expires_at": None if permanent else expires_at,
            "is_permanent": permanent,
        }
        async with self.transaction("upsert grant") as session:
            # config only accepts PostgreSQL and SQLite URLs
            insert = _UPSERT_BUILDERS[session.get_bind().dialect.name]
            stmt = insert(AuthSession).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=[AuthSession.user_id],
                set_={
                    "authorized_by": stmt.excluded.authorized_by,
                    "expires_at": stmt.excluded.expires_at,
                    "is_permanent": stmt.excluded.is_permanent,
                },
            )
            await session.execute(stmt)

    async def get(self, user_id: int) -> Optional[Grant]:
        async with self.transaction("get grant") as session:
            row = await session.get(AuthSession, user_id)
            return Grant.from_row(row) if row else None

    async def delete(self, user_id: int) -> bool:
        """Remove the grant; deleting a missing grant is a no-op. Returns True if a row was removed."""
        async with self.transaction("delete grant") as session:
            result = await session.execute(
                delete(AuthSession).where(AuthSession.user_id == user_id)
            )
            return (result.rowcount or 0) > 0

    async def list_all(self) -> List[Grant]:
        async with self.transaction("list grants") as session:
            rows = await session.scalars(select(AuthSession).order_by(AuthSession.user_id))
            return [Grant.from_row(row) for row in rows]


session_store = SessionStore(SessionLocal)
