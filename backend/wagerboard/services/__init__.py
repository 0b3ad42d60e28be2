"""Services module."""

from wagerboard.services.aggregator import StatisticsAggregator, WinGroup, statistics_aggregator
from wagerboard.services.leaderboard import LeaderboardRanker
from wagerboard.services.ledger_service import LedgerService

__all__ = [
    "LeaderboardRanker",
    "LedgerService",
    "StatisticsAggregator",
    "WinGroup",
    "statistics_aggregator",
]
