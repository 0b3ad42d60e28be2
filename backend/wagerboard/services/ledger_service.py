"""Wager ledger façade: placement, resolution, history, stats and standings."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Union
from uuid import UUID

from wagerboard.database import Database
from wagerboard.exceptions import InvalidStateTransitionError, ValidationError
from wagerboard.models import BetResult, Wager
from wagerboard.repositories import SqlUserDirectory, UserDirectory, WagerStore
from wagerboard.schemas import AggregateStats, LeaderboardEntry
from wagerboard.services.aggregator import (
    StatisticsAggregator,
    is_loss,
    is_win,
    statistics_aggregator,
)
from wagerboard.services.leaderboard import LeaderboardRanker

logger = logging.getLogger(__name__)


def _parse_wager_id(wager_id: Union[UUID, str]) -> UUID:
    if isinstance(wager_id, UUID):
        return wager_id
    try:
        return UUID(str(wager_id))
    except ValueError:
        raise ValidationError(f"Malformed wager id: {wager_id!r}")


def _parse_resolution(result: Union[BetResult, str]) -> BetResult:
    try:
        target = BetResult(result)
    except ValueError:
        raise ValidationError(f"Unknown bet result: {result!r}")

    if not target.is_terminal:
        raise ValidationError("A wager can only be resolved to Win or Lose")
    return target


class LedgerService:
    """
    Single entry point for wager operations.

    Each operation runs in its own transaction on the injected Database:
    commit on success, rollback on any failure or cancellation. Errors are
    never swallowed; callers see the ledger exception unchanged.

    Resolution state machine:
        Pending --resolve(Win)--> Win
        Pending --resolve(Lose)--> Lose
    Win and Lose are terminal.
    """

    def __init__(
        self,
        database: Database,
        store: Optional[WagerStore] = None,
        aggregator: Optional[StatisticsAggregator] = None,
        directory: Optional[UserDirectory] = None,
        ranker: Optional[LeaderboardRanker] = None,
    ):
        self.database = database
        self.store = store or WagerStore()
        self.aggregator = aggregator or statistics_aggregator
        self.directory = directory or SqlUserDirectory()
        self.ranker = ranker or LeaderboardRanker(self.aggregator, self.directory)

    async def place_bet(self, user_id: str, stream_id: str, bet_amount: Any) -> Wager:
        """Record a new Pending wager."""
        async with self.database.transaction() as db:
            wager = await self.store.insert(db, user_id, stream_id, bet_amount)

        logger.info(
            f"Placed wager {wager.id}: user {wager.user_id} ${wager.bet_amount} "
            f"on stream {wager.stream_id}"
        )
        return wager

    async def resolve_bet(
        self,
        wager_id: Union[UUID, str],
        result: Union[BetResult, str],
    ) -> Wager:
        """
        Move a Pending wager to Win or Lose, exactly once.

        The write is guarded on the stored result still being Pending, so of
        two racing resolutions only one lands.
        """
        wager_id = _parse_wager_id(wager_id)
        target = _parse_resolution(result)

        async with self.database.transaction() as db:
            wager = await self.store.get(db, wager_id)
            if wager.bet_result.is_terminal:
                raise InvalidStateTransitionError(
                    f"Wager {wager_id} is already resolved as {wager.bet_result.value}",
                    current_result=wager.bet_result.value,
                )

            updated = await self.store.update(
                db,
                wager_id,
                {"bet_result": target, "resolved_at": datetime.now(timezone.utc)},
                only_if_result=BetResult.PENDING,
            )
            if updated is None:
                current = await self.store.get(db, wager_id)
                raise InvalidStateTransitionError(
                    f"Wager {wager_id} was resolved concurrently as {current.bet_result.value}",
                    current_result=current.bet_result.value,
                )

        logger.info(f"Resolved wager {wager_id} as {target.value}")
        return updated

    async def get_bet(self, wager_id: Union[UUID, str]) -> Wager:
        wager_id = _parse_wager_id(wager_id)
        async with self.database.transaction() as db:
            return await self.store.get(db, wager_id)

    async def list_bets(self) -> list[Wager]:
        async with self.database.transaction() as db:
            return await self.store.find_all(db)

    async def get_stream_history(self, stream_id: str) -> list[Wager]:
        """All wagers on a stream; empty when none."""
        async with self.database.transaction() as db:
            return await self.store.find_by_stream(db, stream_id)

    async def get_user_history(self, user_id: str) -> list[Wager]:
        """All of a user's wagers, active ones included."""
        async with self.database.transaction() as db:
            return await self.store.find_by_user(db, user_id)

    async def get_user_stats(self, user_id: str) -> AggregateStats:
        async with self.database.transaction() as db:
            wagers = await self.store.find_by_user(db, user_id)
        return self.aggregator.aggregate(user_id, wagers)

    async def get_user_win_stats(self, user_id: str) -> AggregateStats:
        async with self.database.transaction() as db:
            wagers = await self.store.find_by_user(db, user_id, result=BetResult.WIN)
        return self.aggregator.aggregate(user_id, wagers, predicate=is_win)

    async def get_user_loss_stats(self, user_id: str) -> AggregateStats:
        async with self.database.transaction() as db:
            wagers = await self.store.find_by_user(db, user_id, result=BetResult.LOSE)
        return self.aggregator.aggregate(user_id, wagers, predicate=is_loss)

    async def get_leaderboard(self, limit: Optional[int] = None) -> list[LeaderboardEntry]:
        """
        Standings by total stake won, highest first.

        Raises DanglingReferenceError when a winner's user record is gone.
        """
        if limit is not None and limit < 1:
            raise ValidationError(f"limit must be at least 1, got {limit}")

        async with self.database.transaction() as db:
            winners = await self.store.find_by_result(db, BetResult.WIN)
            return await self.ranker.rank(db, winners, limit=limit)

    async def delete_bet(self, wager_id: Union[UUID, str]) -> None:
        """Administrative removal. Deleting an unknown id raises NotFoundError."""
        wager_id = _parse_wager_id(wager_id)
        async with self.database.transaction() as db:
            await self.store.delete(db, wager_id)

        logger.info(f"Deleted wager {wager_id}")
