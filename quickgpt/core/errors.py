from __future__ import annotations


class QuickGptError(Exception):
    """Base for failures reported to clients as ``{success: false, message}``."""

    code = "internal_error"
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InsufficientCreditsError(QuickGptError):
    code = "insufficient_credits"
    default_message = "You don't have enough credits to use this feature"


class ChatNotFoundError(QuickGptError):
    code = "chat_not_found"
    default_message = "Chat not found"


class UpstreamError(QuickGptError):
    code = "upstream_error"
    default_message = "The generation service is unavailable"


class PersistenceError(QuickGptError):
    code = "persistence_error"
    default_message = "Failed to save the conversation"


class InvalidCredentialsError(QuickGptError):
    code = "invalid_credentials"
    default_message = "Invalid email or password"


class UserExistsError(QuickGptError):
    code = "user_exists"
    default_message = "User already exists"


class NotAuthorizedError(QuickGptError):
    """Raised by the auth dependency; rendered as HTTP 401."""

    code = "not_authorized"
    default_message = "Not authorized, token failed"
