from __future__ import annotations

import logging
from functools import lru_cache

import jwt
from fastapi import Depends, Header
from sqlalchemy.orm import Session

from quickgpt.core.errors import NotAuthorizedError
from quickgpt.core.security import decode_access_token
from quickgpt.core.settings import get_settings
from quickgpt.db.models import User
from quickgpt.db.session import get_db_session
from quickgpt.services.chat_service import ChatService
from quickgpt.services.gemini_service import GeminiService
from quickgpt.services.imagekit_service import ImageKitService
from quickgpt.services.message_service import MessageService
from quickgpt.services.user_service import UserService

logger = logging.getLogger(__name__)


@lru_cache
def get_gemini_service() -> GeminiService:
    return GeminiService(settings=get_settings())


@lru_cache
def get_imagekit_service() -> ImageKitService:
    return ImageKitService(settings=get_settings())


def get_current_user(
    authorization: str | None = Header(default=None),
    db: Session = Depends(get_db_session),
) -> User:
    # The web client sends the raw token with no scheme; accept "Bearer" too.
    if not authorization:
        raise NotAuthorizedError("Not authorized, no token")
    token = authorization.removeprefix("Bearer ").strip()

    try:
        user_id = decode_access_token(token, get_settings())
    except jwt.ExpiredSignatureError as e:
        raise NotAuthorizedError("Not authorized, token expired") from e
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected invalid token: {e}")
        raise NotAuthorizedError("Not authorized, token invalid") from e

    user = db.get(User, user_id)
    if user is None:
        raise NotAuthorizedError("Not authorized, user not found")
    return user


def get_chat_service(db: Session = Depends(get_db_session)) -> ChatService:
    return ChatService(db)


def get_user_service(db: Session = Depends(get_db_session)) -> UserService:
    return UserService(db, settings=get_settings())


def get_text_message_service(
    db: Session = Depends(get_db_session),
    gemini_service: GeminiService = Depends(get_gemini_service),
) -> MessageService:
    return MessageService(db, text_generator=gemini_service, settings=get_settings())


def get_image_message_service(
    db: Session = Depends(get_db_session),
    imagekit_service: ImageKitService = Depends(get_imagekit_service),
) -> MessageService:
    return MessageService(
        db, image_generator=imagekit_service, settings=get_settings()
    )
