"""
ORM models for the message archive and authorization grants.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, DateTime, Integer, String, Text, false, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# SQLite only autoincrements INTEGER PRIMARY KEY
_Id = BigInteger().with_variant(Integer, "sqlite")


class Message(Base):
    """One observed group send or edit event. Rows are never updated."""

    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(_Id, primary_key=True, autoincrement=True)
    msg_id: Mapped[int] = mapped_column(BigInteger, index=True)
    chat_id: Mapped[int] = mapped_column(BigInteger, index=True)
    chat_title: Mapped[Optional[str]] = mapped_column(Text)
    user_id: Mapped[Optional[int]] = mapped_column(BigInteger, index=True)
    username: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    first_name: Mapped[Optional[str]] = mapped_column(Text)
    content: Mapped[Optional[str]] = mapped_column(Text)
    event: Mapped[str] = mapped_column(String(8))  # "send" | "edit"
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), index=True)
    original_content: Mapped[Optional[str]] = mapped_column(Text)


class AuthSession(Base):
    """Authorization grant; at most one per user."""

    __tablename__ = "auth_sessions"

    user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    authorized_by: Mapped[Optional[int]] = mapped_column(BigInteger)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    is_permanent: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())
