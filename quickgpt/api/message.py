import logging

from fastapi import APIRouter, Depends

from quickgpt.core.errors import QuickGptError
from quickgpt.db.models import User
from quickgpt.dependencies import (
    get_current_user,
    get_image_message_service,
    get_text_message_service,
)
from quickgpt.models.chat import (
    ImageMessageRequest,
    MessageResponse,
    TextMessageRequest,
)
from quickgpt.models.response import FailureResponse
from quickgpt.services.message_service import MessageService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/text", response_model=MessageResponse | FailureResponse)
async def text_message(
    request: TextMessageRequest,
    user: User = Depends(get_current_user),
    message_service: MessageService = Depends(get_text_message_service),
) -> MessageResponse | FailureResponse:
    """Answer a text prompt for one credit.

    The reply is returned only after it and the prompt are saved and the credit
    is charged.
    """
    try:
        reply = await message_service.send_text(
            user=user, chat_id=request.chat_id, prompt=request.prompt
        )
        return MessageResponse(reply=reply)
    except QuickGptError as e:
        return FailureResponse.from_error(e)
    except Exception as e:
        logger.exception("Text message endpoint failed")
        return FailureResponse(message=str(e))


@router.post("/image", response_model=MessageResponse | FailureResponse)
async def image_message(
    request: ImageMessageRequest,
    user: User = Depends(get_current_user),
    message_service: MessageService = Depends(get_image_message_service),
) -> MessageResponse | FailureResponse:
    """Generate an image for two credits; the reply content is the hosted image URL."""
    try:
        reply = await message_service.send_image(
            user=user,
            chat_id=request.chat_id,
            prompt=request.prompt,
            is_published=request.is_published,
        )
        return MessageResponse(reply=reply)
    except QuickGptError as e:
        return FailureResponse.from_error(e)
    except Exception as e:
        logger.exception("Image message endpoint failed")
        return FailureResponse(message=str(e))
