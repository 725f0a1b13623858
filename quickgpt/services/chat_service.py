from __future__ import annotations

import logging

from sqlalchemy.orm import Session, selectinload

from quickgpt.core.errors import ChatNotFoundError
from quickgpt.db.models import Chat, User

logger = logging.getLogger(__name__)


class ChatService:
    """Service for a user's chat threads."""

    def __init__(self, db: Session):
        self._db = db

    def create_chat(self, user: User) -> Chat:
        """
        Start an empty chat named "New Chat".

        Args:
            user: Owner of the new chat

        Returns:
            The persisted Chat
        """
        try:
            chat = Chat(user_id=user.id, user_name=user.name)
            self._db.add(chat)
            self._db.commit()
            self._db.refresh(chat)
        except Exception as e:
            self._db.rollback()
            logger.exception(f"Failed to create chat for user {user.id}: {e}")
            raise

        logger.info(f"Created chat {chat.id} for user {user.id}")
        return chat

    def list_chats(self, user: User) -> list[Chat]:
        """
        List a user's chats with their messages.

        Args:
            user: Owner whose chats are listed

        Returns:
            Chats ordered by most recent activity first
        """
        return (
            self._db.query(Chat)
            .options(selectinload(Chat.messages))
            .filter(Chat.user_id == user.id)
            .order_by(Chat.updated_at.desc(), Chat.id.desc())
            .all()
        )

    def delete_chat(self, user: User, chat_id: int) -> None:
        """
        Delete one of the user's chats and its messages.

        Args:
            user: Owner of the chat
            chat_id: Chat to delete; another user's chat counts as missing
        """
        chat = (
            self._db.query(Chat)
            .filter(Chat.id == chat_id, Chat.user_id == user.id)
            .first()
        )
        if chat is None:
            raise ChatNotFoundError()

        try:
            self._db.delete(chat)
            self._db.commit()
        except Exception as e:
            self._db.rollback()
            logger.exception(f"Failed to delete chat {chat_id}: {e}")
            raise

        logger.info(f"Deleted chat {chat_id} for user {user.id}")
