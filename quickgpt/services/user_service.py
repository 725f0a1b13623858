from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quickgpt.core.errors import InvalidCredentialsError, UserExistsError
from quickgpt.core.security import create_access_token, hash_password, verify_password
from quickgpt.core.settings import Settings, get_settings
from quickgpt.db.models import Chat, ChatMessage, User
from quickgpt.models.user import PublishedImage

logger = logging.getLogger(__name__)


class UserService:
    """Service for user accounts and the community image gallery."""

    def __init__(self, db: Session, settings: Settings | None = None):
        self._db = db
        self._settings = settings or get_settings()

    def register(self, name: str, email: str, password: str) -> str:
        """
        Create a user with the starting credit balance.

        Args:
            name: Display name, also shown on published images
            email: Login email; stored lower-cased and unique
            password: Plain password; only its salted hash is stored

        Returns:
            Access token for the new user
        """
        email = email.strip().lower()
        if self._db.query(User).filter(User.email == email).first():
            raise UserExistsError()

        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            credits=self._settings.default_credits,
        )
        try:
            self._db.add(user)
            self._db.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent registration for the same email.
            self._db.rollback()
            raise UserExistsError() from e

        logger.info(f"Registered user {user.id}")
        return create_access_token(user.id, self._settings)

    def login(self, email: str, password: str) -> str:
        """
        Check credentials and issue a token.

        Args:
            email: Login email, matched case-insensitively
            password: Plain password

        Returns:
            Access token; unknown email and wrong password both raise
            InvalidCredentialsError
        """
        user = (
            self._db.query(User)
            .filter(User.email == email.strip().lower())
            .first()
        )
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        return create_access_token(user.id, self._settings)

    def published_images(self) -> list[PublishedImage]:
        """Return community-published images, newest first."""
        rows = (
            self._db.query(ChatMessage.content, Chat.user_name)
            .join(Chat, ChatMessage.chat_id == Chat.id)
            .filter(ChatMessage.is_image.is_(True), ChatMessage.is_published.is_(True))
            .order_by(ChatMessage.id.desc())
            .all()
        )
        return [
            PublishedImage(image_url=content, user_name=user_name)
            for content, user_name in rows
        ]
