"""
Membership gate: non-admin users only see groups they currently belong to.
"""

import asyncio
from typing import Awaitable, Callable, Iterable, List

from config import MEMBERSHIP_CHECK_CONCURRENCY, MEMBERSHIP_CHECK_TIMEOUT_SECONDS
from core.telegram import bot, app_logger
from auth.access_control import AuthorizationService, auth_service

MEMBER_STATUSES = {"creator", "administrator", "member", "restricted"}
DEPARTED_STATUSES = {"left", "kicked"}

# oracle(chat_id, user_id) -> ChatMember-like object with .status
MembershipOracle = Callable[[int, int], Awaitable[object]]


async def telegram_membership(chat_id: int, user_id: int):
    """Ask Telegram for the user's membership in chat_id"""
    return await bot.get_chat_member(chat_id, user_id)


class MembershipGate:
    """
    Cross-checks current group membership before exposing a group's archive.

    Any oracle error (API error, timeout, bot removed from chat) counts
    as "not a member".
    """

    def __init__(self, auth: AuthorizationService, oracle: MembershipOracle,
                 timeout: float = MEMBERSHIP_CHECK_TIMEOUT_SECONDS,
                 concurrency: int = MEMBERSHIP_CHECK_CONCURRENCY):
        self.auth = auth
        self.oracle = oracle
        self.timeout = timeout
        self.concurrency = concurrency

    async def is_member(self, user_id: int, chat_id: int) -> bool:
        if self.auth.is_admin(user_id):
            return True

        try:
            member = await asyncio.wait_for(self.oracle(chat_id, user_id), timeout=self.timeout)
        except Exception as e:
            app_logger.warning(
                f"Membership check failed, denying: user_id={user_id}, chat_id={chat_id}, error={e}"
            )
            return False

        status = getattr(member, "status", None)
        if status in DEPARTED_STATUSES:
            return False
        if status == "restricted" and getattr(member, "is_member", True) is False:
            # Restricted users who already left the chat
            return False
        if status not in MEMBER_STATUSES:
            app_logger.warning(f"Unknown membership status: user_id={user_id}, chat_id={chat_id}, status={status}")
            return False
        return True

    async def filter_member_chats(self, user_id: int, chat_ids: Iterable[int]) -> List[int]:
        """Chats from chat_ids the user may browse, in the original order"""
        chat_ids = list(chat_ids)
        if self.auth.is_admin(user_id):
            return chat_ids
        limit = asyncio.Semaphore(self.concurrency)

        async def check(chat_id):
            async with limit:
                return await self.is_member(user_id, chat_id)

        results = await asyncio.gather(*(check(chat_id) for chat_id in chat_ids))
        return [chat_id for chat_id, allowed in zip(chat_ids, results) if allowed]


membership_gate = MembershipGate(auth_service, telegram_membership)
