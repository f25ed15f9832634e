"""
User command handlers: help, log browsing and the private greeting.
"""

from core.telegram import bot, app_logger
from auth.access_control import auth_service
from auth.membership import membership_gate
from config.help_texts import HELP_TEXTS
from logs.browser import log_browser
from logs.scope import ChatScope, InvalidInput, parse_author_scope
from storage.archive import archive
from utils.alerts import notify_admin
from utils.decorators import require_auth, log_command, handle_errors
from utils.formatters import escape_html, format_log_page
from utils.keyboards import admin_keyboard, viewer_keyboard, navigation_markup, group_picker_markup


def command_args(message):
    """Текст после команды (без /command@botname)"""
    parts = (message.text or "").split(maxsplit=1)
    return parts[1].strip() if len(parts) > 1 else ""


async def readable_chats(user_id, scope):
    """
    Chats whose rows an author scope may show to user_id.

    None means no restriction (admin, or a single group already gated).
    """
    if isinstance(scope, ChatScope) or auth_service.is_admin(user_id):
        return None
    groups = await archive.list_groups()
    return await membership_gate.filter_member_chats(user_id, [chat_id for chat_id, _ in groups])


async def send_log_page(chat_id, scope, page=1, chat_ids=None):
    log_page = await log_browser.render_page(scope, page, chat_ids)
    await bot.send_message(
        chat_id,
        format_log_page(log_page),
        parse_mode="HTML",
        reply_markup=navigation_markup(scope, log_page),
    )


@bot.message_handler(commands=["help", "start"])
@handle_errors()
@log_command
async def send_welcome(message):
    user_id = message.from_user.id
    if auth_service.is_admin(user_id):
        await bot.reply_to(message, HELP_TEXTS["admin_help"], parse_mode="HTML",
                           reply_markup=admin_keyboard() if message.chat.type == "private" else None)
        return

    if await auth_service.is_authorized(user_id):
        await bot.reply_to(message, HELP_TEXTS["user_help"], parse_mode="HTML",
                           reply_markup=viewer_keyboard() if message.chat.type == "private" else None)
        return

    await bot.reply_to(message, HELP_TEXTS["errors"]["no_access"])


@bot.message_handler(commands=["logs"])
@handle_errors()
@require_auth()
@log_command
async def show_logs(message):
    """В группе - логи этой группы, в личке - выбор группы"""
    user_id = message.from_user.id

    if message.chat.type != "private":
        if not await membership_gate.is_member(user_id, message.chat.id):
            await bot.reply_to(message, HELP_TEXTS["errors"]["not_member"])
            return
        await send_log_page(message.chat.id, ChatScope(message.chat.id))
        return

    groups = await archive.list_groups()
    if not groups:
        await bot.reply_to(message, HELP_TEXTS["logs"]["no_groups"])
        return

    titles = dict(groups)
    visible = await membership_gate.filter_member_chats(user_id, [chat_id for chat_id, _ in groups])
    if not visible:
        await bot.reply_to(message, HELP_TEXTS["logs"]["no_visible_groups"])
        return

    await bot.reply_to(
        message,
        HELP_TEXTS["logs"]["pick_group"],
        reply_markup=group_picker_markup([(chat_id, titles[chat_id]) for chat_id in visible]),
    )


@bot.message_handler(commands=["userlogs"])
@handle_errors()
@require_auth()
@log_command
async def show_user_logs(message):
    """Логи конкретного автора по ID или @username"""
    args = command_args(message)
    if not args:
        await bot.reply_to(message, HELP_TEXTS["logs"]["userlogs_usage"], parse_mode="HTML")
        return

    try:
        scope = parse_author_scope(args.split()[0])
    except InvalidInput:
        await bot.reply_to(message, HELP_TEXTS["logs"]["userlogs_usage"], parse_mode="HTML")
        return

    user_id = message.from_user.id
    if not auth_service.is_admin(user_id):
        await notify_admin(HELP_TEXTS["alerts"]["userlogs"].format(
            user_id=user_id,
            target=escape_html(scope.label),
        ))

    await send_log_page(message.chat.id, scope, chat_ids=await readable_chats(user_id, scope))


@bot.message_handler(
    func=lambda message: message.chat.type == "private" and not (message.text or "").startswith("/"),
    content_types=["text"],
)
@handle_errors()
async def private_greeting(message):
    """Приветствие в личке с клавиатурой по роли; остальным молчим"""
    user_id = message.from_user.id

    if auth_service.is_admin(user_id):
        await bot.reply_to(message, HELP_TEXTS["greeting"]["admin"], reply_markup=admin_keyboard())
        return

    if await auth_service.is_authorized(user_id):
        await bot.reply_to(message, HELP_TEXTS["greeting"]["authorized"], reply_markup=viewer_keyboard())
        return

    app_logger.info(f"Ignored private message from unauthorized user_id={user_id}")
