"""
Access control (authorization checks).

AuthorizationService is the single place that knows about the admin id.
Handlers, the membership gate and the log browser all ask it.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from config import ADMIN_ID
from core.telegram import app_logger
from storage.sessions import Grant, SessionStore, session_store


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how grants are stored"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class AuthorizationService:
    """
    Decides whether a user may use privileged features right now.

    Args:
        admin_id: Telegram user id of the bot owner
        store: grant storage
        clock: returns the current naive UTC time (injectable for tests)
    """

    def __init__(self, admin_id: int, store: SessionStore, clock: Callable[[], datetime] = utcnow):
        self.admin_id = admin_id
        self.store = store
        self.clock = clock

    def is_admin(self, user_id: Optional[int]) -> bool:
        return user_id is not None and int(user_id) == self.admin_id

    async def is_authorized(self, user_id: Optional[int]) -> bool:
        """
        Check access for user_id.

        NOTE: this is not a pure read. An expired time-boxed grant is
        deleted from the store when it is evaluated here (there is no
        background sweep), so the first check after expiry reclaims it.

        Raises:
            StorageFailure: if the grant store is unavailable
        """
        if user_id is None:
            return False
        if self.is_admin(user_id):
            return True

        grant = await self.store.get(user_id)
        if grant is None:
            return False
        if grant.permanent:
            return True

        if grant.is_expired(self.clock()):
            # Concurrent checks may race here; deleting a missing row is a no-op
            await self.store.delete(user_id)
            app_logger.info(f"Grant expired and reclaimed: user_id={user_id}, expires_at={grant.expires_at}")
            return False
        return True

    async def authorize(self, user_id: int, granted_by: int, duration: Optional[timedelta]) -> Grant:
        """Create or replace a grant. duration=None means permanent."""
        permanent = duration is None
        expires_at = None if permanent else self.clock() + duration
        await self.store.upsert(user_id, granted_by, expires_at, permanent)
        app_logger.info(
            f"Grant issued: user_id={user_id}, by={granted_by}, "
            f"permanent={permanent}, expires_at={expires_at}"
        )
        return Grant(user_id=user_id, granted_by=granted_by, expires_at=expires_at, permanent=permanent)

    async def revoke(self, user_id: int) -> bool:
        removed = await self.store.delete(user_id)
        app_logger.info(f"Grant revoked: user_id={user_id}, existed={removed}")
        return removed


auth_service = AuthorizationService(ADMIN_ID, session_store)
