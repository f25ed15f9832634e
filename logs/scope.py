"""
Log scopes: which slice of the archive a query targets.

A scope is parsed once at the boundary (command argument or button
payload) and passed around as one of three explicit variants.
"""

from dataclasses import dataclass
from typing import Union

from auth.validators import InvalidInput, parse_chat_id, parse_user_id, validate_username

__all__ = [
    "ChatScope", "UserIdScope", "HandleScope", "AuthorScope", "Scope",
    "InvalidInput", "parse_author_scope", "parse_chat_id", "parse_user_id", "parse_scope",
]


@dataclass(frozen=True)
class ChatScope:
    chat_id: int

    kind = "group"

    @property
    def token(self) -> str:
        return str(self.chat_id)


@dataclass(frozen=True)
class UserIdScope:
    user_id: int

    kind = "user"

    @property
    def token(self) -> str:
        return str(self.user_id)

    @property
    def label(self) -> str:
        return str(self.user_id)


@dataclass(frozen=True)
class HandleScope:
    handle: str

    kind = "user"

    def __post_init__(self):
        # Handles compare case-insensitively and without the leading @
        object.__setattr__(self, "handle", self.handle.lstrip("@").lower())

    @property
    def token(self) -> str:
        return self.handle

    @property
    def label(self) -> str:
        return f"@{self.handle}"


AuthorScope = Union[UserIdScope, HandleScope]
Scope = Union[ChatScope, UserIdScope, HandleScope]


def parse_author_scope(text) -> AuthorScope:
    """
    Digits → UserIdScope, anything else → HandleScope.

    Raises:
        InvalidInput: empty input or a string that cannot be a username
    """
    value = str(text or "").strip()
    if not value:
        raise InvalidInput("empty author")
    if value.isascii() and value.isdigit():
        return UserIdScope(parse_user_id(value))

    handle = value.lstrip("@")
    if not validate_username(handle):
        raise InvalidInput(f"invalid username: {value!r}")
    return HandleScope(handle)


def parse_scope(kind: str, token: str) -> Scope:
    """Rebuild a scope from its (kind, token) pair as stored in a button payload"""
    if kind == ChatScope.kind:
        return ChatScope(parse_chat_id(token))
    if kind == "user":
        return parse_author_scope(token)
    raise InvalidInput(f"unknown scope kind: {kind!r}")
