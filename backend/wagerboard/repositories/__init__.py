"""
Repository layer over the async SQLAlchemy session.

Repositories:
- WagerStore: Bet ledger storage with guarded resolution updates
- SqlUserDirectory: User name resolution for the leaderboard
- StreamRegistry: Stream metadata
"""

from wagerboard.repositories.stream_registry import StreamRegistry
from wagerboard.repositories.user_directory import SqlUserDirectory, UserDirectory, UserName
from wagerboard.repositories.wager_store import WagerStore

__all__ = [
    "SqlUserDirectory",
    "StreamRegistry",
    "UserDirectory",
    "UserName",
    "WagerStore",
]
