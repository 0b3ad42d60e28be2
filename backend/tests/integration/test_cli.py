"""
Integration Test: CLI

Runs the argparse commands against a file-backed SQLite database.
"""

import asyncio
import sys

import pytest

from wagerboard import __main__ as cli
from wagerboard.config import get_settings
from wagerboard.database import Database
from wagerboard.models import BetResult
from wagerboard.repositories import SqlUserDirectory
from wagerboard.services import LedgerService


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


def _run_cli(monkeypatch, *argv: str) -> int:
    monkeypatch.setattr(sys, "argv", ["wagerboard", *argv])
    return cli.main()


def _seed(url: str) -> None:
    async def run():
        database = Database(url)
        await database.connect()
        try:
            ledger = LedgerService(database)
            async with database.transaction() as db:
                await SqlUserDirectory().create_user(
                    db, "u1", "Tom", "Brady", "tom@wagerboard.test", "tbradyFight"
                )
            wager = await ledger.place_bet("u1", "s1", 75)
            await ledger.resolve_bet(wager.id, BetResult.WIN)
            await ledger.place_bet("u1", "s2", 25)
        finally:
            await database.close()

    asyncio.run(run())


def test_init_db_and_empty_leaderboard(database_url, monkeypatch, capsys) -> None:
    assert _run_cli(monkeypatch, "init-db") == 0
    assert _run_cli(monkeypatch, "leaderboard") == 0

    assert "No winning wagers yet." in capsys.readouterr().out


def test_leaderboard_and_stats_output(database_url, monkeypatch, capsys) -> None:
    assert _run_cli(monkeypatch, "init-db") == 0
    _seed(database_url)
    capsys.readouterr()

    assert _run_cli(monkeypatch, "leaderboard", "--limit", "5") == 0
    board = capsys.readouterr().out
    assert "Tom Brady" in board
    assert "75" in board

    assert _run_cli(monkeypatch, "stats", "u1") == 0
    stats = capsys.readouterr().out
    assert "Bets:    2" in stats
    assert "Total:   100" in stats


def test_stats_for_unknown_user(database_url, monkeypatch, capsys) -> None:
    assert _run_cli(monkeypatch, "init-db") == 0
    assert _run_cli(monkeypatch, "stats", "nobody") == 0

    assert "No wagers for user nobody." in capsys.readouterr().out


def test_no_command_prints_help(database_url, monkeypatch) -> None:
    assert _run_cli(monkeypatch) == 1
