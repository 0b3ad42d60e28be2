"""
Statistics Aggregator

Pure computation over a wager collection. Nothing is cached or maintained
incrementally: every call scans the full matching set it is given.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Iterable, Optional

from wagerboard.models import BetResult, Wager
from wagerboard.schemas import AggregateStats

WagerPredicate = Callable[[Wager], bool]

ZERO = Decimal("0")
CENT = Decimal("0.01")


def is_win(wager: Wager) -> bool:
    return wager.bet_result == BetResult.WIN


def is_loss(wager: Wager) -> bool:
    return wager.bet_result == BetResult.LOSE


@dataclass
class WinGroup:
    """Winning stakes of one user."""

    user_id: str
    total_won: Decimal = ZERO
    win_count: int = 0


class StatisticsAggregator:
    """
    Per-user aggregates and leaderboard groupings.

    Stateless; safe to share across concurrent requests.
    """

    def aggregate(
        self,
        user_id: str,
        wagers: Iterable[Wager],
        predicate: Optional[WagerPredicate] = None,
    ) -> AggregateStats:
        """
        Sum, mean, extrema and win/loss counts of bet_amount over matches.

        No matches yields a zero aggregate (bet_count == 0) rather than a
        division error.
        """
        amounts: list[Decimal] = []
        win_count = 0
        loss_count = 0

        for wager in wagers:
            if predicate is not None and not predicate(wager):
                continue
            amounts.append(Decimal(str(wager.bet_amount)))
            if is_win(wager):
                win_count += 1
            elif is_loss(wager):
                loss_count += 1

        if not amounts:
            return AggregateStats(user_id=user_id)

        total = sum(amounts, ZERO)
        return AggregateStats(
            user_id=user_id,
            bet_count=len(amounts),
            total_bet=total,
            avg_bet=(total / len(amounts)).quantize(CENT),
            min_bet=min(amounts),
            max_bet=max(amounts),
            win_count=win_count,
            loss_count=loss_count,
        )

    def group_wins(self, wagers: Iterable[Wager]) -> list[WinGroup]:
        """Group winning wagers by user, in first-seen order."""
        groups: dict[str, WinGroup] = {}

        for wager in wagers:
            if not is_win(wager):
                continue
            group = groups.get(wager.user_id)
            if group is None:
                group = groups[wager.user_id] = WinGroup(user_id=wager.user_id)
            group.total_won += Decimal(str(wager.bet_amount))
            group.win_count += 1

        return list(groups.values())


# Singleton instance
statistics_aggregator = StatisticsAggregator()
