"""Bets API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from wagerboard.api.errors import ERROR_RESPONSES, with_deadline
from wagerboard.database.dependencies import get_ledger
from wagerboard.schemas import (
    AggregateStats,
    LeaderboardEntry,
    WagerCreate,
    WagerResolve,
    WagerResponse,
)
from wagerboard.services import LedgerService

router = APIRouter(prefix="/bets", tags=["Bets"], responses=ERROR_RESPONSES)


@router.get("/", response_model=list[LeaderboardEntry])
async def get_leaderboard(
    request: Request,
    limit: Optional[int] = Query(None, ge=1),
    ledger: LedgerService = Depends(get_ledger),
):
    """Leaderboard of users by total stake won."""
    settings = request.app.state.settings
    if limit is None:
        limit = settings.leaderboard.default_limit
    if limit is not None:
        limit = min(limit, settings.leaderboard.max_limit)

    return await with_deadline(request, ledger.get_leaderboard(limit=limit))


@router.post("/", response_model=WagerResponse, status_code=201)
async def create_bet(
    request: Request,
    bet: WagerCreate,
    ledger: LedgerService = Depends(get_ledger),
):
    """Place a new bet."""
    wager = await with_deadline(
        request,
        ledger.place_bet(bet.user_id, bet.stream_id, bet.bet_amount),
    )
    return WagerResponse.model_validate(wager)


@router.get("/all", response_model=list[WagerResponse])
async def get_all_bets(request: Request, ledger: LedgerService = Depends(get_ledger)):
    """Every bet in the ledger."""
    wagers = await with_deadline(request, ledger.list_bets())
    return [WagerResponse.model_validate(w) for w in wagers]


@router.get("/id/{wager_id}", response_model=WagerResponse)
async def get_bet(
    request: Request,
    wager_id: str,
    ledger: LedgerService = Depends(get_ledger),
):
    wager = await with_deadline(request, ledger.get_bet(wager_id))
    return WagerResponse.model_validate(wager)


@router.get("/stream/{stream_id}", response_model=list[WagerResponse])
async def get_stream_bets(
    request: Request,
    stream_id: str,
    ledger: LedgerService = Depends(get_ledger),
):
    """All bets on a stream."""
    wagers = await with_deadline(request, ledger.get_stream_history(stream_id))
    return [WagerResponse.model_validate(w) for w in wagers]


@router.get("/totalStats/{user_id}", response_model=AggregateStats)
async def get_total_stats(
    request: Request,
    user_id: str,
    ledger: LedgerService = Depends(get_ledger),
):
    """Sum, average, min and max of a user's stakes."""
    return await with_deadline(request, ledger.get_user_stats(user_id))


@router.get("/totalWon/{user_id}", response_model=AggregateStats)
async def get_total_won(
    request: Request,
    user_id: str,
    ledger: LedgerService = Depends(get_ledger),
):
    return await with_deadline(request, ledger.get_user_win_stats(user_id))


@router.get("/totalLost/{user_id}", response_model=AggregateStats)
async def get_total_lost(
    request: Request,
    user_id: str,
    ledger: LedgerService = Depends(get_ledger),
):
    return await with_deadline(request, ledger.get_user_loss_stats(user_id))


@router.get("/{user_id}", response_model=list[WagerResponse])
async def get_user_bets(
    request: Request,
    user_id: str,
    ledger: LedgerService = Depends(get_ledger),
):
    """History of a user's bets, active ones included."""
    wagers = await with_deadline(request, ledger.get_user_history(user_id))
    return [WagerResponse.model_validate(w) for w in wagers]


@router.patch("/{wager_id}", response_model=WagerResponse)
async def resolve_bet(
    request: Request,
    wager_id: str,
    resolution: WagerResolve,
    ledger: LedgerService = Depends(get_ledger),
):
    """Resolve a pending bet as Win or Lose."""
    wager = await with_deadline(
        request,
        ledger.resolve_bet(wager_id, resolution.bet_result),
    )
    return WagerResponse.model_validate(wager)


@router.delete("/{wager_id}", status_code=204)
async def delete_bet(
    request: Request,
    wager_id: str,
    ledger: LedgerService = Depends(get_ledger),
):
    await with_deadline(request, ledger.delete_bet(wager_id))
    return Response(status_code=204)
