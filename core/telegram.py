"""
Telegram bot initialization and logging setup.
"""

import logging
import telebot
from telebot.async_telebot import AsyncTeleBot
from config import TG_BOT_TOKEN, LOG_LEVEL

# Setup telebot logger
logger = telebot.logger
telebot.logger.setLevel(LOG_LEVEL)

# Настройка логирования (только в stdout для Docker)
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler()
    ]
)

# Application logger
app_logger = logging.getLogger(__name__)

# Create bot instance; handlers are async
bot = AsyncTeleBot(TG_BOT_TOKEN)
