"""Shared fixtures: in-memory ledger databases and wager builders."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from wagerboard.config import Settings
from wagerboard.database import Database
from wagerboard.models import BetResult, Wager
from wagerboard.services import LedgerService

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


@asynccontextmanager
async def open_ledger(url: str = MEMORY_URL):
    """Fresh database with tables, wrapped in a LedgerService."""
    database = Database(url)
    await database.connect()
    await database.create_all()
    try:
        yield LedgerService(database)
    finally:
        await database.close()


def make_wager(user_id: str, amount, result: BetResult = BetResult.PENDING, stream_id: str = "s1") -> Wager:
    """Detached wager for pure aggregation tests."""
    return Wager(
        id=uuid4(),
        user_id=user_id,
        stream_id=stream_id,
        bet_amount=Decimal(str(amount)),
        bet_result=result,
        created_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def ledger_factory():
    return open_ledger


@pytest.fixture
def file_ledger_factory(tmp_path):
    """Ledger on a SQLite file, where each session has its own connection."""
    return lambda: open_ledger(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")


@pytest.fixture
def wager_factory():
    return make_wager


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url=MEMORY_URL,
        logfire_token="",
        request_timeout_seconds=5,
    )
