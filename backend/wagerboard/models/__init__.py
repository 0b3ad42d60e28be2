"""Database models module."""

from wagerboard.models.stream import Stream
from wagerboard.models.user import User
from wagerboard.models.wager import BetResult, Wager

__all__ = [
    "BetResult",
    "Stream",
    "User",
    "Wager",
]
