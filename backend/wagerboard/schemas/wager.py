"""Wager Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import Field

from wagerboard.models.wager import BetResult
from wagerboard.schemas.common import BaseSchema


class WagerCreate(BaseSchema):
    """Wager placement schema."""

    user_id: str = Field(min_length=1, max_length=64)
    stream_id: str = Field(min_length=1, max_length=64)
    bet_amount: Decimal = Field(gt=0, max_digits=15, decimal_places=2)


class WagerResolve(BaseSchema):
    """Resolution request. The ledger rejects Pending as a target."""

    bet_result: BetResult


class WagerResponse(BaseSchema):
    """Wager response schema."""

    id: UUID
    user_id: str
    stream_id: str
    bet_amount: Decimal
    bet_result: BetResult
    created_at: datetime
    resolved_at: Optional[datetime] = None
