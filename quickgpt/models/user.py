from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int = Field(alias="_id")
    name: str
    email: str
    credits: int


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    success: Literal[True] = True
    token: str


class UserDataResponse(BaseModel):
    success: Literal[True] = True
    user: UserRead


class PublishedImage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(alias="imageUrl")
    user_name: str = Field(alias="userName")


class PublishedImagesResponse(BaseModel):
    success: Literal[True] = True
    images: list[PublishedImage]
