"""
Inline and reply keyboards.
"""

from telebot.types import InlineKeyboardButton, InlineKeyboardMarkup, ReplyKeyboardMarkup
from config import GRANT_DURATIONS
from config.help_texts import HELP_TEXTS
from logs import callbacks
from utils.formatters import truncate


def admin_keyboard():
    """Полная клавиатура администратора"""
    markup = ReplyKeyboardMarkup(resize_keyboard=True)
    markup.row("/logs", "/help")
    markup.row("/grants", "/wipe")
    return markup


def viewer_keyboard():
    """Клавиатура пользователя с доступом (только просмотр)"""
    markup = ReplyKeyboardMarkup(resize_keyboard=True)
    markup.row("/logs")
    return markup


def navigation_markup(scope, log_page):
    """Prev / export / next row for a rendered page"""
    row = []
    if log_page.has_prev:
        row.append(InlineKeyboardButton("⬅️ Назад", callback_data=callbacks.encode_page(scope, log_page.page - 1)))
    row.append(InlineKeyboardButton("⬇️ TXT", callback_data=callbacks.encode_export(scope)))
    if log_page.has_next:
        row.append(InlineKeyboardButton("➡️ Вперёд", callback_data=callbacks.encode_page(scope, log_page.page + 1)))

    markup = InlineKeyboardMarkup()
    markup.row(*row)
    return markup


def group_picker_markup(groups):
    """groups: [(chat_id, title), ...]"""
    markup = InlineKeyboardMarkup()
    for chat_id, title in groups:
        label = truncate(title or str(chat_id), 40)
        markup.row(InlineKeyboardButton(f"📂 {label}", callback_data=callbacks.encode_view(chat_id)))
    return markup


def grant_duration_markup(user_id):
    markup = InlineKeyboardMarkup()
    markup.row(*[
        InlineKeyboardButton(HELP_TEXTS["durations"][key], callback_data=callbacks.encode_grant(user_id, key))
        for key in GRANT_DURATIONS
    ])
    return markup


def wipe_confirm_markup(chat_id=None):
    """chat_id=None → подтверждение очистки всего архива"""
    markup = InlineKeyboardMarkup()
    markup.row(
        InlineKeyboardButton("🗑 Удалить", callback_data=callbacks.encode_wipe(chat_id)),
        InlineKeyboardButton("Отмена", callback_data=callbacks.encode_wipe_cancel()),
    )
    return markup
