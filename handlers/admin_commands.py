"""
Admin command handlers: grants and archive wipes.
"""

from core.telegram import bot
from auth.access_control import auth_service
from config.help_texts import HELP_TEXTS
from handlers.commands import command_args
from logs.scope import InvalidInput, parse_chat_id, parse_user_id
from storage.archive import archive
from utils.decorators import require_auth, log_command, handle_errors
from utils.formatters import escape_html, format_grant
from utils.keyboards import admin_keyboard, grant_duration_markup, wipe_confirm_markup
from utils.messaging import send_long_message


@bot.message_handler(commands=["grant"])
@handle_errors()
@require_auth(admin_only=True, alert_on_deny=True)
@log_command
async def grant_access(message):
    """Выдать доступ: срок выбирается кнопкой, ID зашит в кнопку"""
    try:
        user_id = parse_user_id(command_args(message).split(" ")[0])
    except InvalidInput:
        await bot.reply_to(message, HELP_TEXTS["admin"]["grant_usage"], parse_mode="HTML")
        return

    await bot.reply_to(
        message,
        HELP_TEXTS["admin"]["grant_choose"].format(user_id=user_id),
        parse_mode="HTML",
        reply_markup=grant_duration_markup(user_id),
    )


@bot.message_handler(commands=["revoke"])
@handle_errors()
@require_auth(admin_only=True, alert_on_deny=True)
@log_command
async def revoke_access(message):
    try:
        user_id = parse_user_id(command_args(message).split(" ")[0])
    except InvalidInput:
        await bot.reply_to(message, HELP_TEXTS["admin"]["revoke_usage"], parse_mode="HTML")
        return

    if await auth_service.revoke(user_id):
        await bot.reply_to(message, HELP_TEXTS["admin"]["revoked"].format(user_id=user_id), parse_mode="HTML")
    else:
        await bot.reply_to(message, HELP_TEXTS["admin"]["revoke_missing"].format(user_id=user_id), parse_mode="HTML")


@bot.message_handler(commands=["grants"])
@handle_errors()
@require_auth(admin_only=True, alert_on_deny=True)
@log_command
async def list_grants(message):
    """Список доступов (только для админа)"""
    grants = await auth_service.store.list_all()
    if not grants:
        await bot.reply_to(message, HELP_TEXTS["admin"]["grants_empty"], reply_markup=admin_keyboard())
        return

    text = HELP_TEXTS["admin"]["grants_title"] + "\n".join(format_grant(grant) for grant in grants)
    await send_long_message(message.chat.id, text, reply_to_message=message, parse_mode="HTML")


@bot.message_handler(commands=["wipe"])
@handle_errors()
@require_auth(admin_only=True, alert_on_deny=True)
@log_command
async def wipe_logs(message):
    """
    /wipe в группе - очистить эту группу.
    /wipe <chat_id> или /wipe all в личке.
    Удаление выполняется только после нажатия кнопки подтверждения.
    """
    args = command_args(message)

    if not args and message.chat.type != "private":
        chat_id = message.chat.id
    elif args.lower() == "all":
        await bot.reply_to(
            message,
            HELP_TEXTS["admin"]["wipe_confirm_all"],
            parse_mode="HTML",
            reply_markup=wipe_confirm_markup(None),
        )
        return
    else:
        try:
            chat_id = parse_chat_id(args)
        except InvalidInput:
            await bot.reply_to(message, HELP_TEXTS["admin"]["wipe_usage"], parse_mode="HTML")
            return

    title = await archive.chat_title(chat_id) or str(chat_id)
    await bot.reply_to(
        message,
        HELP_TEXTS["admin"]["wipe_confirm_chat"].format(title=escape_html(title), chat_id=chat_id),
        parse_mode="HTML",
        reply_markup=wipe_confirm_markup(chat_id),
    )
