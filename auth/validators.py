"""
Validation of ids and usernames supplied by users.
"""

import re

_USER_ID = re.compile(r'^[0-9]+$')
_CHAT_ID = re.compile(r'^-?[0-9]+$')


class InvalidInput(ValueError):
    """Malformed id or argument supplied by a user"""


def validate_username(username: str) -> bool:
    """
    Проверка формата Telegram username (без @).

    Требования:
    - Не пустой, не длиннее 32 символов
    - Только латинские буквы, цифры и подчеркивание
    - Не может начинаться с цифры (иначе не отличить от ID)

    Минимальная длина не проверяется: в логах встречаются
    короткие служебные и старые username.
    """
    if not username:
        return False

    if len(username) > 32:
        return False

    if not re.match(r'^[a-zA-Z_][a-zA-Z0-9_]*$', username):
        return False

    return True


def parse_user_id(text) -> int:
    """Positive numeric Telegram user id"""
    value = str(text or "").strip()
    if not _USER_ID.match(value):
        raise InvalidInput(f"invalid user id: {value!r}")
    return int(value)


def parse_chat_id(text) -> int:
    """Numeric chat id; groups are negative"""
    value = str(text or "").strip()
    if not _CHAT_ID.match(value):
        raise InvalidInput(f"invalid chat id: {value!r}")
    return int(value)
