"""
Text formatting utilities for Telegram messages.
"""

import html as html_module
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from config import DISPLAY_TIMEZONE, MAX_ENTRY_LENGTH

_display_tz = ZoneInfo(DISPLAY_TIMEZONE)


def escape_html(text):
    """Экранирует HTML спецсимволы"""
    if not text:
        return ""
    return html_module.escape(str(text))


def truncate(text, max_length=MAX_ENTRY_LENGTH):
    """Обрезает длинный текст, добавляя многоточие"""
    text = "" if text is None else str(text)
    if len(text) <= max_length:
        return text
    return text[:max_length - 1] + "…"


def format_timestamp(value):
    """Naive UTC datetime from the database → display timezone string"""
    if value is None:
        return "?"
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(_display_tz).strftime("%Y-%m-%d %H:%M:%S")


def format_log_entry(row):
    """Одна запись лога в HTML"""
    name = escape_html(row.first_name or "Без имени")
    time = format_timestamp(row.created_at)

    if row.event == "edit":
        return (
            f"✏️ <b>{name}</b> изменил {time}:\n"
            f"🗑 Было: {escape_html(truncate(row.original_content))}\n"
            f"🆕 Стало: {escape_html(truncate(row.content))}"
        )
    return f"💬 <b>{name}</b> {time}:\n{escape_html(truncate(row.content))}"


def format_log_page(log_page):
    """
    Render a LogPage as Telegram HTML.

    Empty pages produce a short "no records" text instead of an empty body.
    """
    if log_page.is_empty:
        return f"📭 {escape_html(log_page.title)} (стр. {log_page.page})"

    text = f"📂 <b>{escape_html(log_page.title)}</b> (стр. {log_page.page})\n\n"
    text += "\n\n".join(format_log_entry(row) for row in log_page.entries)
    return text


def format_grant(grant):
    """Строка списка доступов"""
    if grant.permanent:
        term = "навсегда"
    else:
        term = f"до {format_timestamp(grant.expires_at)}"
    return f"• <code>{grant.user_id}</code> — {term}"
