"""
Integration Test: LedgerService

End-to-end ledger operations on an in-memory database.

Test cases:
- place_bet then get returns a Pending wager with the same amount
- Resolution happens exactly once
- Stats over history, wins and losses
- Leaderboard ordering and dangling users
- delete_bet / NotFoundError paths
- Concurrent resolutions: one wins, other wagers are unaffected
- Cancellation leaves no partial state
"""

import asyncio
from decimal import Decimal
from uuid import uuid4

import pytest

from wagerboard.exceptions import (
    DanglingReferenceError,
    InvalidStateTransitionError,
    NotFoundError,
    ValidationError,
)
from wagerboard.models import BetResult
from wagerboard.repositories import SqlUserDirectory

directory = SqlUserDirectory()


async def _seed_users(ledger, *user_ids: str) -> None:
    async with ledger.database.transaction() as db:
        for user_id in user_ids:
            await directory.create_user(
                db,
                user_id=user_id,
                first_name=f"First-{user_id}",
                last_name=f"Last-{user_id}",
                email=f"{user_id}@wagerboard.test",
                twitch_username=f"twitch_{user_id}",
            )


def test_place_bet_then_get(ledger_factory) -> None:
    async def run():
        async with ledger_factory() as ledger:
            placed = await ledger.place_bet("u1", "s1", Decimal("25"))
            return placed, await ledger.get_bet(placed.id)

    placed, fetched = asyncio.run(run())

    assert fetched.id == placed.id
    assert fetched.bet_result == BetResult.PENDING
    assert fetched.bet_amount == Decimal("25")


def test_place_bet_rejects_non_positive_amount(ledger_factory) -> None:
    async def run():
        async with ledger_factory() as ledger:
            with pytest.raises(ValidationError):
                await ledger.place_bet("u1", "s1", 0)
            return await ledger.list_bets()

    assert asyncio.run(run()) == []


def test_resolve_then_second_resolve_fails(ledger_factory) -> None:
    async def run():
        async with ledger_factory() as ledger:
            wager = await ledger.place_bet("u1", "s1", 40)
            resolved = await ledger.resolve_bet(wager.id, BetResult.WIN)

            with pytest.raises(InvalidStateTransitionError) as exc_info:
                await ledger.resolve_bet(wager.id, BetResult.LOSE)
            with pytest.raises(InvalidStateTransitionError):
                await ledger.resolve_bet(str(wager.id), "Win")

            return resolved, exc_info.value, await ledger.get_bet(wager.id)

    resolved, error, stored = asyncio.run(run())

    assert resolved.bet_result == BetResult.WIN
    assert resolved.resolved_at is not None
    assert error.current_result == "Win"
    assert stored.bet_result == BetResult.WIN


def test_resolve_unknown_id_fails(ledger_factory) -> None:
    async def run():
        async with ledger_factory() as ledger:
            await ledger.resolve_bet(uuid4(), BetResult.WIN)

    with pytest.raises(NotFoundError):
        asyncio.run(run())


@pytest.mark.parametrize("result", [BetResult.PENDING, "Pending", "Draw", ""])
def test_resolve_rejects_non_terminal_targets(ledger_factory, result) -> None:
    async def run():
        async with ledger_factory() as ledger:
            wager = await ledger.place_bet("u1", "s1", 10)
            with pytest.raises(ValidationError):
                await ledger.resolve_bet(wager.id, result)
            return await ledger.get_bet(wager.id)

    assert asyncio.run(run()).bet_result == BetResult.PENDING


def test_resolve_rejects_malformed_id(ledger_factory) -> None:
    async def run():
        async with ledger_factory() as ledger:
            await ledger.resolve_bet("not-a-uuid", BetResult.WIN)

    with pytest.raises(ValidationError):
        asyncio.run(run())


def test_resolution_lost_to_concurrent_writer(ledger_factory) -> None:
    """The guarded write refuses a wager another request resolved after our read."""

    class StaleReadStore:
        """Real store whose first lookup returns a Pending snapshot."""

        def __init__(self, inner, snapshot):
            self.inner = inner
            self.snapshot = snapshot

        def __getattr__(self, name):
            return getattr(self.inner, name)

        async def get(self, db, wager_id):
            if self.snapshot is not None:
                snapshot, self.snapshot = self.snapshot, None
                return snapshot
            return await self.inner.get(db, wager_id)

    async def run():
        async with ledger_factory() as ledger:
            wager = await ledger.place_bet("u1", "s1", 10)
            await ledger.resolve_bet(wager.id, BetResult.WIN)

            real_store = ledger.store
            ledger.store = StaleReadStore(real_store, snapshot=wager)
            with pytest.raises(InvalidStateTransitionError) as exc_info:
                await ledger.resolve_bet(wager.id, BetResult.LOSE)
            ledger.store = real_store

            return exc_info.value, await ledger.get_bet(wager.id)

    error, stored = asyncio.run(run())

    assert error.current_result == "Win"
    assert stored.bet_result == BetResult.WIN


def test_user_stats(ledger_factory) -> None:
    async def run():
        async with ledger_factory() as ledger:
            for amount in (10, 20, 30):
                await ledger.place_bet("u1", "s1", amount)
            await ledger.place_bet("u2", "s1", 1000)
            return await ledger.get_user_stats("u1")

    stats = asyncio.run(run())

    assert stats.total_bet == Decimal("60")
    assert stats.avg_bet == Decimal("20")
    assert stats.min_bet == Decimal("10")
    assert stats.max_bet == Decimal("30")
    assert stats.bet_count == 3


def test_user_stats_without_wagers(ledger_factory) -> None:
    async def run():
        async with ledger_factory() as ledger:
            return await ledger.get_user_stats("nobody")

    stats = asyncio.run(run())

    assert stats.is_empty
    assert stats.total_bet == 0


def test_win_and_loss_stats(ledger_factory) -> None:
    async def run():
        async with ledger_factory() as ledger:
            first = await ledger.place_bet("u1", "s1", 50)
            second = await ledger.place_bet("u1", "s2", 15)
            third = await ledger.place_bet("u1", "s3", 20)
            await ledger.place_bet("u1", "s4", 99)
            await ledger.resolve_bet(first.id, BetResult.WIN)
            await ledger.resolve_bet(second.id, BetResult.WIN)
            await ledger.resolve_bet(third.id, BetResult.LOSE)
            return (
                await ledger.get_user_win_stats("u1"),
                await ledger.get_user_loss_stats("u1"),
            )

    won, lost = asyncio.run(run())

    assert won.total_bet == Decimal("65")
    assert won.win_count == 2
    assert won.loss_count == 0
    assert won.max_bet == Decimal("50")
    assert lost.total_bet == Decimal("20")
    assert lost.loss_count == 1
    assert lost.win_count == 0


def test_stream_and_user_history(ledger_factory) -> None:
    async def run():
        async with ledger_factory() as ledger:
            await ledger.place_bet("u1", "s1", 10)
            await ledger.place_bet("u2", "s1", 20)
            await ledger.place_bet("u1", "s2", 30)
            return (
                await ledger.get_stream_history("s1"),
                await ledger.get_user_history("u1"),
                await ledger.get_user_history("u9"),
            )

    stream_history, user_history, empty = asyncio.run(run())

    assert {w.user_id for w in stream_history} == {"u1", "u2"}
    assert {w.stream_id for w in user_history} == {"s1", "s2"}
    assert empty == []


def test_leaderboard(ledger_factory) -> None:
    async def run():
        async with ledger_factory() as ledger:
            await _seed_users(ledger, "u1", "u2")
            a = await ledger.place_bet("u1", "s1", 50)
            b = await ledger.place_bet("u2", "s1", 30)
            c = await ledger.place_bet("u1", "s1", 20)
            await ledger.resolve_bet(a.id, BetResult.WIN)
            await ledger.resolve_bet(b.id, BetResult.WIN)
            await ledger.resolve_bet(c.id, BetResult.LOSE)
            return await ledger.get_leaderboard()

    entries = asyncio.run(run())

    assert [e.user_id for e in entries] == ["u1", "u2"]
    assert entries[0].total_won == Decimal("50")
    assert entries[0].win_count == 1
    assert entries[0].user_name == "First-u1 Last-u1"
    assert entries[1].total_won == Decimal("30")
    assert entries[1].win_count == 1


def test_leaderboard_with_deleted_user(ledger_factory) -> None:
    async def run():
        async with ledger_factory() as ledger:
            await _seed_users(ledger, "u1", "u2")
            a = await ledger.place_bet("u1", "s1", 50)
            b = await ledger.place_bet("u2", "s1", 30)
            await ledger.resolve_bet(a.id, BetResult.WIN)
            await ledger.resolve_bet(b.id, BetResult.WIN)
            async with ledger.database.transaction() as db:
                await directory.delete_user(db, "u2")
            await ledger.get_leaderboard()

    with pytest.raises(DanglingReferenceError):
        asyncio.run(run())


def test_leaderboard_rejects_zero_limit(ledger_factory) -> None:
    async def run():
        async with ledger_factory() as ledger:
            await ledger.get_leaderboard(limit=0)

    with pytest.raises(ValidationError):
        asyncio.run(run())


def test_delete_then_get_fails(ledger_factory) -> None:
    async def run():
        async with ledger_factory() as ledger:
            wager = await ledger.place_bet("u1", "s1", 10)
            await ledger.delete_bet(wager.id)
            with pytest.raises(NotFoundError):
                await ledger.delete_bet(wager.id)
            await ledger.get_bet(wager.id)

    with pytest.raises(NotFoundError):
        asyncio.run(run())


def test_cancelled_resolution_leaves_wager_pending(ledger_factory) -> None:
    class StalledStore:
        """Delegates to the real store but hangs after writing."""

        def __init__(self, inner):
            self.inner = inner

        def __getattr__(self, name):
            return getattr(self.inner, name)

        async def update(self, db, wager_id, patch, only_if_result=None):
            await self.inner.update(db, wager_id, patch, only_if_result=only_if_result)
            await asyncio.sleep(10)

    async def run():
        async with ledger_factory() as ledger:
            wager = await ledger.place_bet("u1", "s1", 10)
            real_store = ledger.store
            ledger.store = StalledStore(real_store)
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(ledger.resolve_bet(wager.id, BetResult.WIN), timeout=0.2)
            ledger.store = real_store
            return await ledger.get_bet(wager.id)

    stored = asyncio.run(run())

    assert stored.bet_result == BetResult.PENDING
    assert stored.resolved_at is None


@pytest.mark.parametrize("factory", ["ledger_factory", "file_ledger_factory"])
def test_concurrent_resolutions_of_one_wager(request, factory) -> None:
    open_ledger = request.getfixturevalue(factory)

    async def run():
        async with open_ledger() as ledger:
            wager = await ledger.place_bet("u1", "s1", 10)
            outcomes = await asyncio.gather(
                ledger.resolve_bet(wager.id, BetResult.WIN),
                ledger.resolve_bet(wager.id, BetResult.LOSE),
                return_exceptions=True,
            )
            return outcomes, await ledger.get_bet(wager.id)

    outcomes, stored = asyncio.run(run())

    succeeded = [o for o in outcomes if not isinstance(o, BaseException)]
    rejected = [o for o in outcomes if isinstance(o, BaseException)]
    assert len(succeeded) == 1
    assert len(rejected) == 1
    assert isinstance(rejected[0], InvalidStateTransitionError)
    assert stored.bet_result == succeeded[0].bet_result
    assert rejected[0].current_result == stored.bet_result.value


@pytest.mark.parametrize("factory", ["ledger_factory", "file_ledger_factory"])
def test_failed_resolution_does_not_undo_another_wager(request, factory) -> None:
    open_ledger = request.getfixturevalue(factory)

    async def run():
        async with open_ledger() as ledger:
            first = await ledger.place_bet("u1", "s1", 10)
            second = await ledger.place_bet("u2", "s1", 20)
            await ledger.resolve_bet(second.id, BetResult.WIN)

            outcomes = await asyncio.gather(
                ledger.resolve_bet(first.id, BetResult.WIN),
                ledger.resolve_bet(second.id, BetResult.LOSE),
                return_exceptions=True,
            )
            return (
                outcomes,
                await ledger.get_bet(first.id),
                await ledger.get_bet(second.id),
            )

    outcomes, first, second = asyncio.run(run())

    assert outcomes[0].bet_result == BetResult.WIN
    assert isinstance(outcomes[1], InvalidStateTransitionError)
    assert first.bet_result == BetResult.WIN
    assert first.resolved_at is not None
    assert second.bet_result == BetResult.WIN
