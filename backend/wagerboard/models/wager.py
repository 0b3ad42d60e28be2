"""Wager database model."""

import enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Index,
    Numeric,
    String,
)

from wagerboard.database.base import Base
from wagerboard.models.base import UUIDMixin, utcnow


class BetResult(str, enum.Enum):
    """Resolution state of a wager. Pending is the only non-terminal state."""

    PENDING = "Pending"
    WIN = "Win"
    LOSE = "Lose"

    @property
    def is_terminal(self) -> bool:
        return self is not BetResult.PENDING


class Wager(Base, UUIDMixin):
    """Individual bet record on a stream outcome."""

    __tablename__ = "wagers"

    user_id = Column(String(64), nullable=False, index=True)
    stream_id = Column(String(64), nullable=False, index=True)

    bet_amount = Column(Numeric(15, 2), nullable=False)
    bet_result = Column(
        Enum(
            BetResult,
            name="bet_result",
            native_enum=False,
            values_callable=lambda members: [m.value for m in members],
            validate_strings=True,
        ),
        nullable=False,
        default=BetResult.PENDING,
    )

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("bet_amount > 0", name="positive_bet_amount"),
        Index("idx_wagers_user_result", "user_id", "bet_result"),
        Index("idx_wagers_result", "bet_result"),
    )

    def __repr__(self) -> str:
        return f"<Wager {self.id} {self.user_id} ${self.bet_amount} {self.bet_result}>"
