"""
Entry point: group log bot.

Records group messages and edits, serves paginated logs and exports
to the admin and to users holding a grant.
"""

import asyncio
from core.telegram import bot, app_logger
from core.database import engine, init_db
import handlers  # noqa: F401  (registers all handlers and the archive middleware)


async def main():
    await init_db()
    app_logger.info("Бот запущен в режиме polling...")
    try:
        await bot.infinity_polling()
    finally:
        await bot.close_session()
        await engine.dispose()


# Запуск бота в режиме polling
if __name__ == "__main__":
    asyncio.run(main())
