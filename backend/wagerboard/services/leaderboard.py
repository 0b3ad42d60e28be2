"""Leaderboard ranking over winning wagers."""

import logging
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from wagerboard.exceptions import DanglingReferenceError, NotFoundError
from wagerboard.models import Wager
from wagerboard.repositories import UserDirectory
from wagerboard.schemas import LeaderboardEntry
from wagerboard.services.aggregator import StatisticsAggregator, WinGroup

logger = logging.getLogger(__name__)


def standings_key(group: WinGroup):
    """Descending by total won, then user_id ascending for ties."""
    return (-group.total_won, group.user_id)


class LeaderboardRanker:
    """
    Ranks users by the total stake of their winning wagers.

    Process:
    1. Group winning wagers by user
    2. Sort descending by total won, ties by user_id
    3. Cut to the first `limit` groups when a limit is given
    4. Resolve every user's display name through the directory
    """

    def __init__(self, aggregator: StatisticsAggregator, directory: UserDirectory):
        self.aggregator = aggregator
        self.directory = directory

    def standings(
        self,
        wagers: Iterable[Wager],
        limit: Optional[int] = None,
    ) -> list[WinGroup]:
        groups = sorted(self.aggregator.group_wins(wagers), key=standings_key)
        if limit is not None:
            groups = groups[:limit]
        return groups

    async def rank(
        self,
        db: AsyncSession,
        wagers: Iterable[Wager],
        limit: Optional[int] = None,
    ) -> list[LeaderboardEntry]:
        """
        Build the enriched standings.

        A winner missing from the directory fails the whole leaderboard with
        DanglingReferenceError; rows are never dropped.
        """
        leaderboard = []
        for rank, group in enumerate(self.standings(wagers, limit), 1):
            try:
                name = await self.directory.resolve_name(db, group.user_id)
            except NotFoundError:
                raise DanglingReferenceError(
                    f"Leaderboard entrant {group.user_id} has no user record",
                    user_id=group.user_id,
                )

            leaderboard.append(LeaderboardEntry(
                rank=rank,
                user_id=group.user_id,
                user_name=name.full_name,
                total_won=group.total_won,
                win_count=group.win_count,
            ))

        return leaderboard
