"""
Inline button payloads.

Every button carries the full state it needs (scope, page, target user),
so handlers never rely on process memory between a render and a click.
Telegram limits callback_data to 64 bytes.
"""

from dataclasses import dataclass
from typing import Optional

from config import GRANT_DURATIONS
from logs.scope import InvalidInput, Scope, parse_chat_id, parse_scope, parse_user_id

MAX_CALLBACK_BYTES = 64

VIEW = "view"
PAGE = "page"
EXPORT = "export"
GRANT = "grant"
WIPE = "wipe"
WIPE_CANCEL = "wipe_cancel"
WIPE_ALL = "all"


@dataclass(frozen=True)
class CallbackAction:
    action: str
    scope: Optional[Scope] = None
    page: int = 1
    user_id: Optional[int] = None
    duration: Optional[str] = None
    wipe_target: Optional[str] = None


def _checked(data: str) -> str:
    if len(data.encode("utf-8")) > MAX_CALLBACK_BYTES:
        raise ValueError(f"callback payload too long: {data!r}")
    return data


def encode_view(chat_id: int) -> str:
    return _checked(f"{VIEW}:{chat_id}")


def encode_page(scope: Scope, page: int) -> str:
    return _checked(f"{PAGE}:{scope.kind}:{scope.token}:{max(page, 1)}")


def encode_export(scope: Scope) -> str:
    return _checked(f"{EXPORT}:{scope.kind}:{scope.token}")


def encode_grant(user_id: int, duration: str) -> str:
    return _checked(f"{GRANT}:{user_id}:{duration}")


def encode_wipe(chat_id: Optional[int]) -> str:
    """chat_id=None wipes the whole archive"""
    return _checked(f"{WIPE}:{WIPE_ALL if chat_id is None else chat_id}")


def encode_wipe_cancel() -> str:
    return WIPE_CANCEL


def decode(data: str) -> Optional[CallbackAction]:
    """Parse a payload; None for anything malformed or unknown"""
    if not data:
        return None
    if data == WIPE_CANCEL:
        return CallbackAction(WIPE_CANCEL)

    action, _, rest = data.partition(":")
    parts = rest.split(":") if rest else []
    try:
        if action == VIEW and len(parts) == 1:
            return CallbackAction(VIEW, scope=parse_scope("group", parts[0]))
        if action == PAGE and len(parts) == 3:
            # Prev on page 1 may produce 0; clamp instead of rejecting
            page = max(int(parts[2]), 1)
            return CallbackAction(PAGE, scope=parse_scope(parts[0], parts[1]), page=page)
        if action == EXPORT and len(parts) == 2:
            return CallbackAction(EXPORT, scope=parse_scope(parts[0], parts[1]))
        if action == GRANT and len(parts) == 2 and parts[1] in GRANT_DURATIONS:
            return CallbackAction(GRANT, user_id=parse_user_id(parts[0]), duration=parts[1])
        if action == WIPE and len(parts) == 1:
            target = parts[0]
            if target != WIPE_ALL:
                target = str(parse_chat_id(target))
            return CallbackAction(WIPE, wipe_target=target)
    except (InvalidInput, ValueError):
        return None
    return None
