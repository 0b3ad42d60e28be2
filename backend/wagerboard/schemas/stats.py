"""Derived statistics schemas. Never stored; recomputed on every query."""

from decimal import Decimal

from pydantic import Field

from wagerboard.schemas.common import BaseSchema


class AggregateStats(BaseSchema):
    """Aggregate over one user's wagers, optionally restricted by result."""

    user_id: str
    bet_count: int = 0
    total_bet: Decimal = Decimal("0")
    avg_bet: Decimal = Decimal("0")
    min_bet: Decimal = Decimal("0")
    max_bet: Decimal = Decimal("0")
    win_count: int = 0
    loss_count: int = 0

    @property
    def is_empty(self) -> bool:
        return self.bet_count == 0


class LeaderboardEntry(BaseSchema):
    """One row of the standings."""

    rank: int = Field(ge=1)
    user_id: str
    user_name: str
    total_won: Decimal
    win_count: int
