"""User directory and stream registry schemas."""

from typing import Optional
from uuid import UUID

from pydantic import Field

from wagerboard.schemas.common import BaseSchema, TimestampSchema


class UserCreate(BaseSchema):
    id: str = Field(min_length=1, max_length=64)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    twitch_username: str = Field(min_length=1, max_length=100)


class UserResponse(UserCreate, TimestampSchema):
    pass


class StreamCreate(BaseSchema):
    url: str = Field(min_length=1, max_length=2048)
    title: str = Field(min_length=1, max_length=255)


class StreamUpdate(BaseSchema):
    url: Optional[str] = Field(default=None, min_length=1, max_length=2048)
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)


class StreamResponse(StreamCreate, TimestampSchema):
    id: UUID
