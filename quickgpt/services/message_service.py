from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Protocol

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quickgpt.core.errors import (
    ChatNotFoundError,
    InsufficientCreditsError,
    PersistenceError,
)
from quickgpt.core.settings import Settings, get_settings
from quickgpt.db.models import DEFAULT_CHAT_NAME, Chat, ChatMessage, User, now_ms
from quickgpt.models.chat import MessageRead

logger = logging.getLogger(__name__)

CHAT_NAME_MAX_LENGTH = 40


class TextGenerator(Protocol):
    async def generate_reply(self, prompt: str) -> str: ...


class ImageGenerator(Protocol):
    async def generate_image(self, prompt: str) -> str: ...


class MessageService:
    """Dispatch billed prompts: check credits, generate, then persist and charge.

    The generation call happens before any write. The credit decrement and both
    message inserts are committed together, so a chat never holds an exchange
    that was not paid for, and a failed generation costs nothing.
    """

    def __init__(
        self,
        db: Session,
        text_generator: TextGenerator | None = None,
        image_generator: ImageGenerator | None = None,
        settings: Settings | None = None,
    ):
        self._db = db
        self._text = text_generator
        self._image = image_generator
        self._settings = settings or get_settings()

    async def send_text(self, user: User, chat_id: int, prompt: str) -> MessageRead:
        """
        Answer a text prompt and bill it.

        Args:
            user: Authenticated user paying for the reply
            chat_id: Chat owned by ``user`` that receives the exchange
            prompt: Text sent to the model

        Returns:
            MessageRead of the saved assistant reply

        Raises:
            InsufficientCreditsError, ChatNotFoundError, UpstreamError,
            PersistenceError; none of them leaves a charge or a message behind
        """
        cost = self._settings.text_message_cost
        self._ensure_credits(user, cost)
        chat = self._get_chat(user, chat_id)

        prompt_timestamp = now_ms()
        content = await self._text.generate_reply(prompt)

        reply = ChatMessage(
            role="assistant",
            content=content,
            timestamp=now_ms(),
            is_image=False,
            is_published=False,
        )
        if chat.name == DEFAULT_CHAT_NAME and not chat.messages:
            chat.name = prompt[:CHAT_NAME_MAX_LENGTH]

        return self._commit_exchange(user, chat, prompt, prompt_timestamp, reply, cost)

    async def send_image(
        self, user: User, chat_id: int, prompt: str, is_published: bool = False
    ) -> MessageRead:
        """
        Generate an image for a prompt and bill it.

        Args:
            user: Authenticated user paying for the image
            chat_id: Chat owned by ``user`` that receives the exchange
            prompt: Image description
            is_published: Whether the image shows in the community gallery

        Returns:
            MessageRead whose content is the hosted image URL
        """
        cost = self._settings.image_message_cost
        self._ensure_credits(user, cost)
        chat = self._get_chat(user, chat_id)

        prompt_timestamp = now_ms()
        image_url = await self._image.generate_image(prompt)

        reply = ChatMessage(
            role="assistant",
            content=image_url,
            timestamp=now_ms(),
            is_image=True,
            is_published=is_published,
        )
        return self._commit_exchange(user, chat, prompt, prompt_timestamp, reply, cost)

    def _ensure_credits(self, user: User, cost: int) -> None:
        # Fast rejection only; the authoritative check is the conditional
        # decrement in _commit_exchange.
        if user.credits < cost:
            raise InsufficientCreditsError()

    def _get_chat(self, user: User, chat_id: int) -> Chat:
        chat = (
            self._db.query(Chat)
            .filter(Chat.id == chat_id, Chat.user_id == user.id)
            .first()
        )
        if chat is None:
            raise ChatNotFoundError()
        return chat

    def _commit_exchange(
        self,
        user: User,
        chat: Chat,
        prompt: str,
        prompt_timestamp: int,
        reply: ChatMessage,
        cost: int,
    ) -> MessageRead:
        """
        Charge ``cost`` credits and append the prompt and reply in one transaction.

        Args:
            user: Paying user
            chat: Chat receiving the exchange
            prompt: Text the user sent
            prompt_timestamp: When the prompt was received (epoch ms)
            reply: Unsaved assistant message
            cost: Credits to charge

        Returns:
            MessageRead of the reply, captured before the commit so nothing
            after a successful commit can turn it into a failure
        """
        user_id, chat_id = user.id, chat.id
        result = MessageRead.model_validate(reply)

        try:
            charged = self._db.execute(
                sa.update(User)
                .where(User.id == user_id, User.credits >= cost)
                .values(credits=User.credits - cost)
                .execution_options(synchronize_session=False)
            )
            if charged.rowcount != 1:
                self._db.rollback()
                logger.info(f"User {user_id} ran out of credits during chat {chat_id}")
                raise InsufficientCreditsError()

            chat.messages.append(
                ChatMessage(
                    role="user",
                    content=prompt,
                    timestamp=prompt_timestamp,
                    is_image=False,
                )
            )
            chat.messages.append(reply)
            chat.updated_at = datetime.now(timezone.utc)

            self._db.commit()
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.exception(f"Failed to persist exchange for chat {chat_id}: {e}")
            raise PersistenceError() from e

        logger.info(
            f"Charged user {user_id} {cost} credit(s) for chat {chat_id} "
            f"(image={result.is_image})"
        )
        return result
