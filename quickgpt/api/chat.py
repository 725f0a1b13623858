import logging

from fastapi import APIRouter, Depends

from quickgpt.core.errors import QuickGptError
from quickgpt.db.models import User
from quickgpt.dependencies import get_chat_service, get_current_user
from quickgpt.models.chat import (
    ChatCreatedResponse,
    ChatListResponse,
    ChatRead,
    DeleteChatRequest,
)
from quickgpt.models.response import FailureResponse, SuccessResponse
from quickgpt.services.chat_service import ChatService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/create", response_model=ChatCreatedResponse | FailureResponse)
def create_chat(
    user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatCreatedResponse | FailureResponse:
    try:
        chat = chat_service.create_chat(user)
        return ChatCreatedResponse(chat=ChatRead.model_validate(chat))
    except Exception as e:
        logger.exception("Create chat endpoint failed")
        return FailureResponse(message=str(e))


@router.get("/get", response_model=ChatListResponse | FailureResponse)
def get_chats(
    user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatListResponse | FailureResponse:
    try:
        chats = chat_service.list_chats(user)
        return ChatListResponse(chats=[ChatRead.model_validate(c) for c in chats])
    except Exception as e:
        logger.exception("Get chats endpoint failed")
        return FailureResponse(message=str(e))


@router.post("/delete", response_model=SuccessResponse | FailureResponse)
def delete_chat(
    request: DeleteChatRequest,
    user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service),
) -> SuccessResponse | FailureResponse:
    """
    Delete a chat and its messages.

    Args:
        request: Chat to delete
        user: Authenticated owner
        chat_service: Injected service for database operations

    Returns:
        SuccessResponse, or FailureResponse with code chat_not_found when the
        chat does not exist or belongs to someone else
    """
    try:
        chat_service.delete_chat(user, request.chat_id)
        return SuccessResponse(message="Chat deleted")
    except QuickGptError as e:
        return FailureResponse.from_error(e)
    except Exception as e:
        logger.exception("Delete chat endpoint failed")
        return FailureResponse(message=str(e))
