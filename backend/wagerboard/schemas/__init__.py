"""Pydantic schemas module."""

from wagerboard.schemas.common import BaseSchema, ErrorResponse, TimestampSchema
from wagerboard.schemas.directory import (
    StreamCreate,
    StreamResponse,
    StreamUpdate,
    UserCreate,
    UserResponse,
)
from wagerboard.schemas.stats import AggregateStats, LeaderboardEntry
from wagerboard.schemas.wager import WagerCreate, WagerResolve, WagerResponse

__all__ = [
    "AggregateStats",
    "BaseSchema",
    "ErrorResponse",
    "LeaderboardEntry",
    "StreamCreate",
    "StreamResponse",
    "StreamUpdate",
    "TimestampSchema",
    "UserCreate",
    "UserResponse",
    "WagerCreate",
    "WagerResolve",
    "WagerResponse",
]
