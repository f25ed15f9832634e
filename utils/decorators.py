"""
Decorators for command and callback handlers.

Provides reusable decorators for:
- Authorization checks (@require_auth)
- Command logging (@log_command)
- Error handling (@handle_errors)

All decorators are async and accept either a Message or a CallbackQuery.
Recommended order (outermost first): @handle_errors, @require_auth, @log_command,
so storage errors raised during the auth check are still reported.
"""

from functools import wraps
from telebot.types import CallbackQuery
from core.telegram import bot, app_logger
from auth.access_control import auth_service
from config.help_texts import HELP_TEXTS
from logs.scope import InvalidInput
from storage.base import StorageFailure
from utils.alerts import notify_admin
from utils.formatters import escape_html


def _describe(update):
    """(user_id, username, chat_id, command) for logs"""
    user = update.from_user
    user_id = user.id if user else None
    username = user.username if user and user.username else "unknown"
    if isinstance(update, CallbackQuery):
        chat_id = update.message.chat.id if update.message else None
        command = f"callback:{update.data}"
    else:
        chat_id = update.chat.id
        command = update.text.split()[0] if update.text else "unknown"
    return user_id, username, chat_id, command


async def respond(update, text, alert=True):
    """Reply to a message, or answer a button press"""
    if isinstance(update, CallbackQuery):
        await bot.answer_callback_query(update.id, text, show_alert=alert)
    else:
        await bot.reply_to(update, text, parse_mode="HTML")


def require_auth(admin_only=False, alert_on_deny=False):
    """
    Decorator to require authorization (async-compatible).

    Args:
        admin_only: If True, only admin can access (default: False)
        alert_on_deny: Notify the admin about denied attempts

    Usage:
        @require_auth()           # Admin or any user with a valid grant
        @require_auth(admin_only=True)  # Admin only
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(update):
            user_id, username, chat_id, command = _describe(update)

            if admin_only:
                allowed = auth_service.is_admin(user_id)
                denial = HELP_TEXTS["errors"]["admin_only"]
            else:
                # May reclaim an expired grant as a side effect
                allowed = await auth_service.is_authorized(user_id)
                denial = HELP_TEXTS["errors"]["no_access"]

            if not allowed:
                app_logger.warning(
                    f"Access denied: user={username}, user_id={user_id}, chat_id={chat_id}, command={command}"
                )
                await respond(update, denial)
                if alert_on_deny:
                    await notify_admin(HELP_TEXTS["alerts"]["denied"].format(
                        user_id=user_id,
                        username=escape_html(username),
                        command=escape_html(command),
                    ))
                return

            return await func(update)
        return wrapper
    return decorator


def log_command(func):
    """
    Decorator to log command execution (async-compatible).

    Logs: command name, username, and chat_id
    """
    @wraps(func)
    async def wrapper(update):
        user_id, username, chat_id, command = _describe(update)
        app_logger.info(
            f"Command {command}: user={username}, user_id={user_id}, chat_id={chat_id}"
        )
        return await func(update)
    return wrapper


def handle_errors(error_message=HELP_TEXTS["errors"]["generic"]):
    """
    Decorator to handle exceptions (async-compatible).

    InvalidInput is reported with its own text; storage failures and
    anything unexpected get error_message. Nothing is retried.

    Usage:
        @handle_errors()
        @handle_errors("Custom error message")
        async def my_handler(message):
            ...
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(update):
            try:
                return await func(update)
            except InvalidInput as e:
                await respond(update, f"❌ {escape_html(str(e))}")
            except StorageFailure as e:
                _, username, chat_id, _ = _describe(update)
                app_logger.error(
                    f"Storage error in {func.__name__}: user={username}, "
                    f"chat_id={chat_id}, operation={e.operation}, error={e.cause}"
                )
                await respond(update, error_message)
            except Exception as e:
                _, username, chat_id, _ = _describe(update)
                app_logger.exception(
                    f"Error in {func.__name__}: user={username}, "
                    f"chat_id={chat_id}, error={str(e)}"
                )
                await respond(update, error_message)
        return wrapper
    return decorator
