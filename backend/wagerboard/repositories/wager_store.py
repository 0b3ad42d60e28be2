"""
WagerStore

Keyed storage for the 'wagers' table (the ledger).

Every method runs inside the caller's session; the store never commits,
so one ledger operation is one transaction.

Methods:
- insert(...): Validate and persist a new wager
- get(wager_id): Point lookup, NotFoundError if absent
- find_by_stream(stream_id) / find_by_user(user_id, result): Filtered scans
- find_by_result(result): Full scan of one resolution state
- update(wager_id, patch, only_if_result): Partial merge with optional guard
- delete(wager_id): Remove a record, NotFoundError if absent
"""

import math
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from wagerboard.exceptions import NotFoundError, ValidationError
from wagerboard.models import BetResult, Wager

# Fields a patch may touch; everything else on a wager is immutable
MUTABLE_FIELDS = frozenset({"bet_result", "resolved_at"})

CENT = Decimal("0.01")
MAX_BET_AMOUNT = Decimal("9999999999999.99")  # Numeric(15, 2)
MAX_ID_LENGTH = 64  # String(64) on user_id and stream_id


def _coerce_amount(bet_amount: Any) -> Decimal:
    if bet_amount is None or isinstance(bet_amount, bool):
        raise ValidationError("bet_amount is required")

    if isinstance(bet_amount, float) and not math.isfinite(bet_amount):
        raise ValidationError(f"bet_amount must be finite, got {bet_amount}")

    try:
        amount = Decimal(str(bet_amount))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"bet_amount is not a number: {bet_amount!r}")

    if not amount.is_finite():
        raise ValidationError(f"bet_amount must be finite, got {bet_amount}")
    if amount <= 0:
        raise ValidationError(f"bet_amount must be positive, got {amount}")
    if amount > MAX_BET_AMOUNT:
        raise ValidationError(f"bet_amount exceeds {MAX_BET_AMOUNT}")
    if amount != amount.quantize(CENT):
        raise ValidationError(f"bet_amount has more than two decimal places: {amount}")
    return amount


def _require_id(name: str, value: Any) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{name} is required")
    if len(str(value)) > MAX_ID_LENGTH:
        raise ValidationError(f"{name} is longer than {MAX_ID_LENGTH} characters")
    return str(value)


def _coerce_result(bet_result: Any) -> BetResult:
    try:
        return BetResult(bet_result)
    except ValueError:
        raise ValidationError(f"Unknown bet result: {bet_result!r}")


class WagerStore:
    """Insert, lookup, scan, guarded update and delete of wagers."""

    async def insert(
        self,
        db: AsyncSession,
        user_id: str,
        stream_id: str,
        bet_amount: Any,
        bet_result: BetResult = BetResult.PENDING,
    ) -> Wager:
        wager = Wager(
            id=uuid4(),
            user_id=_require_id("user_id", user_id),
            stream_id=_require_id("stream_id", stream_id),
            bet_amount=_coerce_amount(bet_amount),
            bet_result=_coerce_result(bet_result),
            created_at=datetime.now(timezone.utc),
        )
        db.add(wager)
        await db.flush()
        return wager

    async def get(self, db: AsyncSession, wager_id: UUID) -> Wager:
        wager = await db.get(Wager, wager_id, populate_existing=True)
        if wager is None:
            raise NotFoundError(f"Wager {wager_id} not found")
        return wager

    async def find_by_stream(self, db: AsyncSession, stream_id: str) -> list[Wager]:
        result = await db.execute(
            select(Wager)
            .where(Wager.stream_id == stream_id)
            .order_by(Wager.created_at)
        )
        return list(result.scalars().all())

    async def find_by_user(
        self,
        db: AsyncSession,
        user_id: str,
        result: Optional[BetResult] = None,
    ) -> list[Wager]:
        query = select(Wager).where(Wager.user_id == user_id)

        if result is not None:
            query = query.where(Wager.bet_result == result)

        rows = await db.execute(query.order_by(Wager.created_at))
        return list(rows.scalars().all())

    async def find_by_result(self, db: AsyncSession, result: BetResult) -> list[Wager]:
        rows = await db.execute(
            select(Wager)
            .where(Wager.bet_result == result)
            .order_by(Wager.created_at)
        )
        return list(rows.scalars().all())

    async def find_all(self, db: AsyncSession) -> list[Wager]:
        rows = await db.execute(select(Wager).order_by(Wager.created_at))
        return list(rows.scalars().all())

    async def update(
        self,
        db: AsyncSession,
        wager_id: UUID,
        patch: dict[str, Any],
        only_if_result: Optional[BetResult] = None,
    ) -> Optional[Wager]:
        """
        Merge `patch` into the wager.

        With `only_if_result`, the write only lands while the stored result
        still equals it. A guard miss writes nothing and returns None.
        """
        illegal = set(patch) - MUTABLE_FIELDS
        if illegal:
            raise ValidationError(
                f"Cannot modify immutable wager fields: {', '.join(sorted(illegal))}"
            )
        if "bet_result" in patch:
            patch = {**patch, "bet_result": _coerce_result(patch["bet_result"])}

        stmt = update(Wager).where(Wager.id == wager_id)
        if only_if_result is not None:
            stmt = stmt.where(Wager.bet_result == only_if_result)

        outcome = await db.execute(
            stmt.values(**patch).execution_options(synchronize_session=False)
        )

        if outcome.rowcount == 0:
            # Either the id is unknown or the guard did not match
            await self.get(db, wager_id)
            return None

        return await self.get(db, wager_id)

    async def delete(self, db: AsyncSession, wager_id: UUID) -> None:
        outcome = await db.execute(
            delete(Wager)
            .where(Wager.id == wager_id)
            .execution_options(synchronize_session=False)
        )
        if outcome.rowcount == 0:
            raise NotFoundError(f"Wager {wager_id} not found")
