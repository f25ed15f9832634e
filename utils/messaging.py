"""
Messaging utilities: long replies and file exports.
"""

import io
from core.telegram import bot, app_logger
from config import MAX_MESSAGE_LENGTH


async def send_long_message(chat_id, text, reply_to_message=None, parse_mode="HTML", reply_markup=None):
    """
    Send a message, splitting it if it's too long (Telegram limit: 4096 chars).

    Args:
        chat_id: Telegram chat ID
        text: Message text
        reply_to_message: Message to reply to (optional)
        parse_mode: Parse mode ("HTML" or None for plain text)
        reply_markup: Keyboard attached to the last chunk (optional)
    """
    chunks = split_text_into_chunks(text, MAX_MESSAGE_LENGTH)

    for i, chunk in enumerate(chunks):
        markup = reply_markup if i == len(chunks) - 1 else None
        if reply_to_message and i == 0:
            await bot.reply_to(reply_to_message, chunk, parse_mode=parse_mode, reply_markup=markup)
        else:
            await bot.send_message(chat_id, chunk, parse_mode=parse_mode, reply_markup=markup)


async def send_text_file(chat_id, filename, content, caption=None):
    """Отправить текст как .txt документ"""
    document = io.BytesIO(content.encode("utf-8"))
    await bot.send_document(
        chat_id,
        document,
        visible_file_name=filename,
        caption=caption,
    )
    app_logger.info(f"File sent: chat_id={chat_id}, filename={filename}, size={len(content)}")


def split_text_into_chunks(text, max_length):
    """
    Split text into chunks by lines, respecting max_length.

    Lines longer than max_length are cut into max_length pieces.

    Args:
        text: Text to split
        max_length: Maximum length per chunk

    Returns:
        List of text chunks (at least one)
    """
    chunks = []
    current_chunk = ""

    for line in text.split('\n'):
        while len(line) > max_length:
            if current_chunk:
                chunks.append(current_chunk)
                current_chunk = ""
            chunks.append(line[:max_length])
            line = line[max_length:]

        # If adding this line would exceed limit, save current chunk
        if len(current_chunk) + len(line) + 1 > max_length:
            if current_chunk:
                chunks.append(current_chunk)
            current_chunk = line
        else:
            if current_chunk:
                current_chunk += '\n' + line
            else:
                current_chunk = line

    if current_chunk or not chunks:
        chunks.append(current_chunk)

    return chunks
