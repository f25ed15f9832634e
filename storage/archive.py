"""
Message archive: append-only store of group messages and edits.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import and_, delete, func, select
from core.database import SessionLocal
from logs.scope import ChatScope, HandleScope, Scope, UserIdScope
from storage.base import SQLRepository
from storage.models import Message

EVENT_SEND = "send"
EVENT_EDIT = "edit"

# Returned when an edit arrives for a message we never saw being sent
UNKNOWN_ORIGINAL = "[неизвестно]"


@dataclass(frozen=True)
class MessageRecord:
    """Observed group event, ready to be appended"""
    msg_id: int
    chat_id: int
    chat_type: str
    chat_title: Optional[str]
    user_id: Optional[int]
    username: Optional[str]
    first_name: Optional[str]
    content: str
    event: str = EVENT_SEND
    original_content: Optional[str] = None


def _scope_filter(scope: Scope, chat_ids: Optional[Iterable[int]] = None):
    """chat_ids=None leaves the scope unrestricted; an empty list matches nothing"""
    if isinstance(scope, ChatScope):
        clause = Message.chat_id == scope.chat_id
    elif isinstance(scope, UserIdScope):
        clause = Message.user_id == scope.user_id
    elif isinstance(scope, HandleScope):
        clause = func.lower(Message.username) == scope.handle
    else:
        raise TypeError(f"unsupported scope: {scope!r}")
    if chat_ids is None:
        return clause
    return and_(clause, Message.chat_id.in_(list(chat_ids)))


class MessageArchive(SQLRepository):
    """
    Append-only message/edit log.

    append() and the wipe methods are the only writers; every other
    method is a pure read. Database errors raise StorageFailure.
    """

    async def append(self, record: MessageRecord) -> bool:
        """
        Insert one record.

        Returns:
            False for private-chat records (never stored), True otherwise
        """
        if record.chat_type == "private":
            return False

        async with self.transaction("append message") as session:
            session.add(Message(
                msg_id=record.msg_id,
                chat_id=record.chat_id,
                chat_title=record.chat_title,
                user_id=record.user_id,
                username=record.username,
                first_name=record.first_name,
                content=record.content,
                event=record.event,
                original_content=record.original_content if record.event == EVENT_EDIT else None,
            ))
        return True

    async def most_recent_original(self, chat_id: int, msg_id: int) -> str:
        """Content of the latest "send" row for the message, or UNKNOWN_ORIGINAL"""
        async with self.transaction("get original content") as session:
            content = await session.scalar(
                select(Message.content)
                .where(
                    Message.chat_id == chat_id,
                    Message.msg_id == msg_id,
                    Message.event == EVENT_SEND,
                )
                .order_by(Message.id.desc())
                .limit(1)
            )
        return content if content is not None else UNKNOWN_ORIGINAL

    async def query_page(self, scope: Scope, offset: int, limit: int,
                         chat_ids: Optional[Iterable[int]] = None) -> List[Message]:
        """
        Newest first; ties on created_at fall back to insertion order.

        chat_ids limits the rows to those chats (None: no limit).
        """
        async with self.transaction("query page") as session:
            rows = await session.scalars(
                select(Message)
                .where(_scope_filter(scope, chat_ids))
                .order_by(Message.created_at.desc(), Message.id.desc())
                .offset(max(offset, 0))
                .limit(limit)
            )
            return list(rows)

    async def query_all(self, scope: Scope, max_rows: int,
                        chat_ids: Optional[Iterable[int]] = None) -> List[Message]:
        """The newest max_rows records of the scope, returned oldest first"""
        async with self.transaction("query all") as session:
            rows = await session.scalars(
                select(Message)
                .where(_scope_filter(scope, chat_ids))
                .order_by(Message.created_at.desc(), Message.id.desc())
                .limit(max_rows)
            )
            rows = list(rows)
        rows.reverse()
        return rows

    async def count(self, scope: Optional[Scope] = None) -> int:
        async with self.transaction("count messages") as session:
            stmt = select(func.count(Message.id))
            if scope is not None:
                stmt = stmt.where(_scope_filter(scope))
            return await session.scalar(stmt) or 0

    async def chat_title(self, chat_id: int) -> Optional[str]:
        """Last seen title of a chat"""
        async with self.transaction("get chat title") as session:
            return await session.scalar(
                select(Message.chat_title)
                .where(Message.chat_id == chat_id)
                .order_by(Message.id.desc())
                .limit(1)
            )

    async def list_groups(self) -> List[Tuple[int, str]]:
        """Distinct group chats (negative ids) with their last seen title"""
        latest = (
            select(func.max(Message.id).label("last_id"))
            .where(Message.chat_id < 0)
            .group_by(Message.chat_id)
            .subquery()
        )
        async with self.transaction("list groups") as session:
            result = await session.execute(
                select(Message.chat_id, Message.chat_title)
                .join(latest, Message.id == latest.c.last_id)
                .order_by(Message.chat_title, Message.chat_id)
            )
            return [(chat_id, title) for chat_id, title in result.all()]

    async def wipe(self, chat_id: int) -> int:
        """Delete every record of one chat. Returns the number of rows removed."""
        async with self.transaction("wipe chat") as session:
            result = await session.execute(delete(Message).where(Message.chat_id == chat_id))
            return result.rowcount or 0

    async def wipe_all(self) -> int:
        async with self.transaction("wipe archive") as session:
            result = await session.execute(delete(Message))
            return result.rowcount or 0


archive = MessageArchive(SessionLocal)
