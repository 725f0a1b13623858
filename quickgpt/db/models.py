from __future__ import annotations

import time
from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quickgpt.db.base import Base

DEFAULT_CHAT_NAME = "New Chat"


def now_ms() -> int:
    """Milliseconds since the epoch, the timestamp unit the web client renders."""
    return int(time.time() * 1000)


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("credits >= 0", name="ck_users_credits_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)

    credits: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default="20"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    chats: Mapped[list["Chat"]] = relationship(
        "Chat",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Chat(Base):
    """A conversation thread owned by one user."""

    __tablename__ = "chats"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Denormalized so community listings need no join on users.
    user_name: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        server_default=DEFAULT_CHAT_NAME,
        default=DEFAULT_CHAT_NAME,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )

    user: Mapped[User] = relationship("User", back_populates="chats")

    # Insertion order is conversation order.
    messages: Mapped[list["ChatMessage"]] = relationship(
        "ChatMessage",
        back_populates="chat",
        order_by="ChatMessage.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    chat_id: Mapped[int] = mapped_column(
        ForeignKey("chats.id", ondelete="CASCADE"), nullable=False, index=True
    )

    role: Mapped[str] = mapped_column(Text, nullable=False)  # "user" or "assistant"
    content: Mapped[str] = mapped_column(Text, nullable=False)

    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_ms)

    is_image: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default="false", default=False
    )
    is_published: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default="false", default=False
    )

    chat: Mapped[Chat] = relationship("Chat", back_populates="messages")
