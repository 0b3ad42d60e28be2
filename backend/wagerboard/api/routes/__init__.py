"""API routes module."""

from wagerboard.api.routes.bets import router as bets_router
from wagerboard.api.routes.streams import router as streams_router
from wagerboard.api.routes.users import router as users_router

__all__ = [
    "bets_router",
    "streams_router",
    "users_router",
]
