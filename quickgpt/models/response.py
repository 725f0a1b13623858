from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from quickgpt.core.errors import QuickGptError


class FailureResponse(BaseModel):
    """Uniform failure body; ``code`` lets clients branch without parsing ``message``."""

    success: Literal[False] = False
    message: str
    code: str = "internal_error"

    @classmethod
    def from_error(cls, error: QuickGptError) -> "FailureResponse":
        return cls(message=error.message, code=error.code)


class SuccessResponse(BaseModel):
    success: Literal[True] = True
    message: str
