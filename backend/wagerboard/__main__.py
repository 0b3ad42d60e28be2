"""Wagerboard CLI entry point."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

env_file = Path.cwd() / ".env"
load_dotenv(env_file)

from wagerboard import __version__
from wagerboard.config import get_settings
from wagerboard.database import Database
from wagerboard.exceptions import LedgerError
from wagerboard.observability import configure_logging
from wagerboard.services import LedgerService

logger = logging.getLogger(__name__)


async def _with_ledger(action):
    """Open the database, run `action(ledger)`, always close."""
    settings = get_settings()
    database = Database(settings.database_url, echo=settings.database_echo)
    await database.connect()
    try:
        return await action(LedgerService(database))
    finally:
        await database.close()


def cmd_init_db(args: argparse.Namespace) -> int:
    """Create all tables."""
    async def run() -> None:
        settings = get_settings()
        database = Database(settings.database_url, echo=settings.database_echo)
        await database.connect()
        try:
            await database.create_all()
        finally:
            await database.close()

    asyncio.run(run())
    print(f"Database initialized at {get_settings().database_url}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from wagerboard.api import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def cmd_leaderboard(args: argparse.Namespace) -> int:
    """Print the standings."""
    try:
        entries = asyncio.run(_with_ledger(lambda ledger: ledger.get_leaderboard(limit=args.limit)))
    except LedgerError as e:
        logger.error(f"Leaderboard failed ({e.kind}): {e.message}")
        return 1

    if not entries:
        print("No winning wagers yet.")
        return 0

    print(f"{'#':>3}  {'Player':<30} {'Won':>12} {'Wins':>5}")
    for entry in entries:
        print(f"{entry.rank:>3}  {entry.user_name:<30} {entry.total_won:>12} {entry.win_count:>5}")
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    """Print a user's aggregate statistics."""
    async def collect(ledger: LedgerService):
        return (
            await ledger.get_user_stats(args.user_id),
            await ledger.get_user_win_stats(args.user_id),
            await ledger.get_user_loss_stats(args.user_id),
        )

    overall, won, lost = asyncio.run(_with_ledger(collect))

    if overall.is_empty:
        print(f"No wagers for user {args.user_id}.")
        return 0

    print(f"User {args.user_id}")
    print(f"  Bets:    {overall.bet_count}  (won {won.bet_count}, lost {lost.bet_count})")
    print(f"  Total:   {overall.total_bet}")
    print(f"  Average: {overall.avg_bet}")
    print(f"  Min/Max: {overall.min_bet} / {overall.max_bet}")
    print(f"  Won:     {won.total_bet}")
    print(f"  Lost:    {lost.total_bet}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        prog="wagerboard",
        description="Wager ledger and leaderboard for live-stream betting",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_init = subparsers.add_parser("init-db", help="Create database tables")
    parser_init.set_defaults(func=cmd_init_db)

    parser_serve = subparsers.add_parser("serve", help="Run the HTTP API")
    parser_serve.add_argument("--host", default=None, help="Bind address")
    parser_serve.add_argument("--port", type=int, default=None, help="Bind port")
    parser_serve.set_defaults(func=cmd_serve)

    parser_leaderboard = subparsers.add_parser("leaderboard", help="Print the leaderboard")
    parser_leaderboard.add_argument("--limit", type=int, default=None, help="Top N only")
    parser_leaderboard.set_defaults(func=cmd_leaderboard)

    parser_stats = subparsers.add_parser("stats", help="Print a user's wager statistics")
    parser_stats.add_argument("user_id", help="User ID")
    parser_stats.set_defaults(func=cmd_stats)

    args = parser.parse_args()

    configure_logging("DEBUG" if args.debug else get_settings().log_level)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
