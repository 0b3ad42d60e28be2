"""
Unit Tests: Statistics Aggregator

Test cases:
- Sum, mean and extrema over a user's wagers
- Empty input gives a zero aggregate
- Win/Lose predicates and counts
- Win grouping order and totals
"""

from decimal import Decimal

from wagerboard.models import BetResult
from wagerboard.services.aggregator import (
    StatisticsAggregator,
    is_loss,
    is_win,
)

aggregator = StatisticsAggregator()


def test_aggregate_totals_mean_and_extrema(wager_factory) -> None:
    wagers = [wager_factory("u1", amount) for amount in (10, 20, 30)]

    stats = aggregator.aggregate("u1", wagers)

    assert stats.bet_count == 3
    assert stats.total_bet == Decimal("60")
    assert stats.avg_bet == Decimal("20")
    assert stats.min_bet == Decimal("10")
    assert stats.max_bet == Decimal("30")
    assert not stats.is_empty


def test_aggregate_empty_is_zero_not_error() -> None:
    stats = aggregator.aggregate("nobody", [])

    assert stats.is_empty
    assert stats.user_id == "nobody"
    assert stats.total_bet == 0
    assert stats.avg_bet == 0
    assert stats.min_bet == 0
    assert stats.max_bet == 0
    assert stats.win_count == 0
    assert stats.loss_count == 0


def test_aggregate_average_rounds_to_cents(wager_factory) -> None:
    wagers = [wager_factory("u1", amount) for amount in (10, 10, 11)]

    stats = aggregator.aggregate("u1", wagers)

    assert stats.avg_bet == Decimal("10.33")


def test_aggregate_counts_wins_and_losses(wager_factory) -> None:
    wagers = [
        wager_factory("u1", 5, BetResult.WIN),
        wager_factory("u1", 7, BetResult.WIN),
        wager_factory("u1", 9, BetResult.LOSE),
        wager_factory("u1", 11),
    ]

    stats = aggregator.aggregate("u1", wagers)

    assert stats.bet_count == 4
    assert stats.win_count == 2
    assert stats.loss_count == 1


def test_aggregate_with_predicate_filters(wager_factory) -> None:
    wagers = [
        wager_factory("u1", 50, BetResult.WIN),
        wager_factory("u1", 20, BetResult.LOSE),
        wager_factory("u2", 30, BetResult.WIN),
    ]

    won = aggregator.aggregate("u1", wagers, predicate=lambda w: w.user_id == "u1" and is_win(w))
    lost = aggregator.aggregate("u1", wagers, predicate=lambda w: w.user_id == "u1" and is_loss(w))

    assert won.total_bet == Decimal("50")
    assert won.win_count == 1
    assert won.loss_count == 0
    assert lost.total_bet == Decimal("20")
    assert lost.loss_count == 1


def test_group_wins_ignores_non_winning_wagers(wager_factory) -> None:
    wagers = [
        wager_factory("u1", 50, BetResult.WIN),
        wager_factory("u2", 30, BetResult.WIN),
        wager_factory("u1", 20, BetResult.LOSE),
        wager_factory("u3", 99),
        wager_factory("u2", 15, BetResult.WIN),
    ]

    groups = aggregator.group_wins(wagers)

    assert [g.user_id for g in groups] == ["u1", "u2"]
    assert groups[0].total_won == Decimal("50")
    assert groups[0].win_count == 1
    assert groups[1].total_won == Decimal("45")
    assert groups[1].win_count == 2


def test_group_wins_empty() -> None:
    assert aggregator.group_wins([]) == []
