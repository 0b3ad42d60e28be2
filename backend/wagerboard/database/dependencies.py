"""
FastAPI dependency injection.
Provides the database handle and ledger service for API endpoints.
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from wagerboard.database.connection import Database


def get_database(request: Request) -> Database:
    """Database handle created by the application lifespan."""
    return request.app.state.database


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides one transaction per request.

    Usage:
        @router.post("/stream")
        async def create_stream(db: AsyncSession = Depends(get_db)):
            ...

    Ensures:
        - Commit when the handler returns
        - Rollback when it raises
        - Connection is returned to the pool
    """
    database: Database = request.app.state.database
    async with database.transaction() as session:
        yield session


def get_ledger(request: Request):
    """Ledger service created by the application lifespan."""
    return request.app.state.ledger
