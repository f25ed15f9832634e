"""
Inline button handlers: group picker, paging, export, grants, wipes.

Authorization is re-checked on every press: a grant may have expired
between rendering the buttons and clicking them.
"""

from datetime import timedelta
from telebot.asyncio_helper import ApiTelegramException
from core.telegram import bot, app_logger
from auth.access_control import auth_service
from auth.membership import membership_gate
from handlers.commands import readable_chats
from config import GRANT_DURATIONS
from config.help_texts import HELP_TEXTS
from logs import callbacks
from logs.browser import log_browser
from logs.scope import ChatScope
from storage.archive import archive
from utils.alerts import notify_user
from utils.decorators import require_auth, log_command, handle_errors, respond
from utils.formatters import format_log_page, format_timestamp
from utils.keyboards import navigation_markup
from utils.messaging import send_text_file

ADMIN_ACTIONS = {callbacks.GRANT, callbacks.WIPE, callbacks.WIPE_CANCEL}


async def edit_or_notice(call, text, reply_markup=None):
    """Edit the button's message; "message is not modified" is not an error"""
    try:
        await bot.edit_message_text(
            text,
            call.message.chat.id,
            call.message.message_id,
            parse_mode="HTML",
            reply_markup=reply_markup,
        )
    except ApiTelegramException as e:
        if "message is not modified" in str(e):
            await bot.answer_callback_query(call.id, HELP_TEXTS["logs"]["page_unchanged"])
            return
        raise
    await bot.answer_callback_query(call.id)


async def check_group_access(call, scope):
    """Membership gate for group scopes; author scopes go through readable_chats"""
    if not isinstance(scope, ChatScope):
        return True
    if await membership_gate.is_member(call.from_user.id, scope.chat_id):
        return True
    await respond(call, HELP_TEXTS["errors"]["not_member"])
    return False


async def show_page(call, scope, page):
    if not await check_group_access(call, scope):
        return
    chat_ids = await readable_chats(call.from_user.id, scope)
    log_page = await log_browser.render_page(scope, page, chat_ids)
    await edit_or_notice(call, format_log_page(log_page), navigation_markup(scope, log_page))


async def export_logs(call, scope):
    if not await check_group_access(call, scope):
        return

    chat_ids = await readable_chats(call.from_user.id, scope)
    payload = await log_browser.render_export(scope, chat_ids)
    if payload.header.total == 0:
        await respond(call, HELP_TEXTS["logs"]["export_empty"])
        return

    await bot.answer_callback_query(call.id, HELP_TEXTS["logs"]["export_started"])
    generated_at = format_timestamp(auth_service.clock())
    try:
        await send_text_file(call.message.chat.id, payload.filename, payload.to_text(generated_at))
    except Exception as e:
        # The query is already answered, so the failure goes out as a message
        app_logger.exception(f"Export failed: user_id={call.from_user.id}, file={payload.filename}, error={e}")
        await bot.send_message(call.message.chat.id, HELP_TEXTS["errors"]["generic"])


async def apply_grant(call, user_id, duration_key):
    hours = GRANT_DURATIONS[duration_key]
    duration = None if hours is None else timedelta(hours=hours)
    await auth_service.authorize(user_id, call.from_user.id, duration)

    label = HELP_TEXTS["durations"][duration_key]
    await edit_or_notice(call, HELP_TEXTS["admin"]["granted"].format(user_id=user_id, duration=label))
    await notify_user(user_id, HELP_TEXTS["admin"]["granted_notify"].format(duration=label))


async def apply_wipe(call, target):
    if target == callbacks.WIPE_ALL:
        count = await archive.wipe_all()
    else:
        count = await archive.wipe(int(target))
    app_logger.warning(f"Archive wiped: target={target}, rows={count}, by={call.from_user.id}")
    await edit_or_notice(call, HELP_TEXTS["admin"]["wiped"].format(count=count))


@bot.callback_query_handler(func=lambda call: True)
@handle_errors()
@require_auth()
@log_command
async def on_callback(call):
    action = callbacks.decode(call.data)
    if action is None:
        await respond(call, HELP_TEXTS["errors"]["bad_callback"])
        return

    if action.action in ADMIN_ACTIONS and not auth_service.is_admin(call.from_user.id):
        await respond(call, HELP_TEXTS["errors"]["admin_only"])
        return

    if action.action == callbacks.VIEW:
        await show_page(call, action.scope, 1)
    elif action.action == callbacks.PAGE:
        await show_page(call, action.scope, action.page)
    elif action.action == callbacks.EXPORT:
        await export_logs(call, action.scope)
    elif action.action == callbacks.GRANT:
        await apply_grant(call, action.user_id, action.duration)
    elif action.action == callbacks.WIPE:
        await apply_wipe(call, action.wipe_target)
    elif action.action == callbacks.WIPE_CANCEL:
        await edit_or_notice(call, HELP_TEXTS["admin"]["wipe_cancelled"])
