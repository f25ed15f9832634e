"""
Archive middleware: records every group message and edit.

Runs before handlers, so commands sent inside groups are logged too.
"""

from telebot.asyncio_handler_backends import BaseMiddleware
from core.telegram import bot, app_logger
from storage.archive import EVENT_EDIT, EVENT_SEND, MessageRecord, archive
from storage.base import StorageFailure

MEDIA_PLACEHOLDER = "[медиа]"
UNKNOWN_CHAT_TITLE = "Неизвестная группа"


def build_record(message, event, original_content=None):
    """Message → MessageRecord (text, caption or a media placeholder)"""
    user = message.from_user
    return MessageRecord(
        msg_id=message.message_id,
        chat_id=message.chat.id,
        chat_type=message.chat.type,
        chat_title=message.chat.title or UNKNOWN_CHAT_TITLE,
        user_id=user.id if user else None,
        username=user.username if user else None,
        first_name=user.first_name if user else None,
        content=message.text or message.caption or MEDIA_PLACEHOLDER,
        event=event,
        original_content=original_content,
    )


async def record_message(message, edited=False):
    """
    Append a group event to the archive. Private chats are skipped.

    Returns True if a row was written. Storage errors are logged and
    swallowed so they never block command handling.
    """
    if message.chat.type == "private":
        return False

    try:
        if edited:
            original = await archive.most_recent_original(message.chat.id, message.message_id)
            record = build_record(message, EVENT_EDIT, original)
        else:
            record = build_record(message, EVENT_SEND)
        return await archive.append(record)
    except StorageFailure as e:
        app_logger.error(
            f"Failed to archive message: chat_id={message.chat.id}, "
            f"msg_id={message.message_id}, edited={edited}, error={e.cause}"
        )
        return False


class ArchiveMiddleware(BaseMiddleware):
    """Writes group messages and edits to the archive before any handler runs"""

    def __init__(self):
        super().__init__()
        self.update_types = ["message", "edited_message"]

    async def pre_process(self, message, data):
        # edit_date is only set on edited_message updates
        await record_message(message, edited=message.edit_date is not None)

    async def post_process(self, message, data, exception):
        pass


bot.setup_middleware(ArchiveMiddleware())
