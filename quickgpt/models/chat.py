from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class MessageRead(BaseModel):
    """A chat message as the web client renders it."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    role: str  # "user" or "assistant"
    content: str
    timestamp: int
    is_image: bool = Field(default=False, alias="isImage")
    is_published: bool = Field(default=False, alias="isPublished")


class ChatRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int = Field(alias="_id")
    user_id: int = Field(alias="userId")
    user_name: str = Field(alias="userName")
    name: str
    messages: list[MessageRead] = Field(default_factory=list)
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class TextMessageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chat_id: int = Field(alias="chatId")
    prompt: str = Field(min_length=1)


class ImageMessageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chat_id: int = Field(alias="chatId")
    prompt: str = Field(min_length=1)
    is_published: bool = Field(default=False, alias="isPublished")


class DeleteChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chat_id: int = Field(alias="chatId")


class MessageResponse(BaseModel):
    success: Literal[True] = True
    reply: MessageRead


class ChatListResponse(BaseModel):
    success: Literal[True] = True
    chats: list[ChatRead]


class ChatCreatedResponse(BaseModel):
    success: Literal[True] = True
    message: str = "Chat created"
    chat: ChatRead
