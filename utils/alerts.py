"""
Best-effort notifications to the admin.
"""

from config import ADMIN_ID
from core.telegram import bot, app_logger


async def notify_admin(text):
    """Отправить уведомление админу; ошибки только логируются"""
    try:
        await bot.send_message(ADMIN_ID, text, parse_mode="HTML")
    except Exception as e:
        app_logger.warning(f"Error notifying admin: {e}")


async def notify_user(user_id, text):
    """Уведомить пользователя (например, о выдаче доступа)"""
    try:
        await bot.send_message(user_id, text, parse_mode="HTML")
        return True
    except Exception as e:
        app_logger.warning(f"Failed to notify user {user_id}: {e}")
        return False
