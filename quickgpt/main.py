import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from quickgpt.api import chat, health, message, user
from quickgpt.core.errors import NotAuthorizedError
from quickgpt.core.logging import configure_logging
from quickgpt.core.settings import get_settings
from quickgpt.models.response import FailureResponse

logger = logging.getLogger(__name__)


async def not_authorized_handler(request: Request, exc: NotAuthorizedError) -> JSONResponse:
    return JSONResponse(
        status_code=401, content=FailureResponse.from_error(exc).model_dump()
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    detail = first.get("msg", "Invalid request")
    body = FailureResponse(
        message=f"{field}: {detail}" if field else detail, code="validation_error"
    )
    return JSONResponse(status_code=422, content=body.model_dump())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=FailureResponse(message="Internal server error").model_dump(),
    )


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(title=settings.app_name)

    app.add_exception_handler(NotAuthorizedError, not_authorized_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(user.router, prefix="/api/user")
    app.include_router(chat.router, prefix="/api/chat")
    app.include_router(message.router, prefix="/api/message")
    # Short paths for the same message endpoints.
    app.include_router(message.router, prefix="/api", include_in_schema=False)

    app.include_router(health.router)

    return app


app = create_app()
