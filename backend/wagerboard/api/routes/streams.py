"""Stream registry API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from wagerboard.api.errors import ERROR_RESPONSES
from wagerboard.database.dependencies import get_db
from wagerboard.repositories import StreamRegistry
from wagerboard.schemas import StreamCreate, StreamResponse, StreamUpdate

router = APIRouter(prefix="/stream", tags=["Streams"], responses=ERROR_RESPONSES)

stream_registry = StreamRegistry()


@router.get("/", response_model=list[StreamResponse])
async def list_streams(db: AsyncSession = Depends(get_db)):
    """All registered streams."""
    streams = await stream_registry.list_streams(db)
    return [StreamResponse.model_validate(s) for s in streams]


@router.post("/", response_model=StreamResponse, status_code=201)
async def create_stream(stream: StreamCreate, db: AsyncSession = Depends(get_db)):
    created = await stream_registry.create_stream(db, url=stream.url, title=stream.title)
    return StreamResponse.model_validate(created)


@router.patch("/{stream_id}", response_model=StreamResponse)
async def update_stream(
    stream_id: UUID,
    changes: StreamUpdate,
    db: AsyncSession = Depends(get_db),
):
    updated = await stream_registry.update_stream(
        db, stream_id, url=changes.url, title=changes.title
    )
    return StreamResponse.model_validate(updated)
