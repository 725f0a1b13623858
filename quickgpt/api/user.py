import logging

from fastapi import APIRouter, Depends

from quickgpt.core.errors import QuickGptError
from quickgpt.db.models import User
from quickgpt.dependencies import get_current_user, get_user_service
from quickgpt.models.response import FailureResponse
from quickgpt.models.user import (
    LoginRequest,
    PublishedImagesResponse,
    RegisterRequest,
    TokenResponse,
    UserDataResponse,
    UserRead,
)
from quickgpt.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=TokenResponse | FailureResponse)
def register(
    request: RegisterRequest,
    user_service: UserService = Depends(get_user_service),
) -> TokenResponse | FailureResponse:
    try:
        token = user_service.register(
            name=request.name, email=request.email, password=request.password
        )
        return TokenResponse(token=token)
    except QuickGptError as e:
        return FailureResponse.from_error(e)
    except Exception as e:
        logger.exception("Register endpoint failed")
        return FailureResponse(message=str(e))


@router.post("/login", response_model=TokenResponse | FailureResponse)
def login(
    request: LoginRequest,
    user_service: UserService = Depends(get_user_service),
) -> TokenResponse | FailureResponse:
    try:
        token = user_service.login(email=request.email, password=request.password)
        return TokenResponse(token=token)
    except QuickGptError as e:
        return FailureResponse.from_error(e)
    except Exception as e:
        logger.exception("Login endpoint failed")
        return FailureResponse(message=str(e))


@router.get("/data", response_model=UserDataResponse)
def user_data(user: User = Depends(get_current_user)) -> UserDataResponse:
    return UserDataResponse(user=UserRead.model_validate(user))


@router.get("/published-images", response_model=PublishedImagesResponse | FailureResponse)
def published_images(
    user_service: UserService = Depends(get_user_service),
) -> PublishedImagesResponse | FailureResponse:
    try:
        return PublishedImagesResponse(images=user_service.published_images())
    except Exception as e:
        logger.exception("Published images endpoint failed")
        return FailureResponse(message=str(e))
