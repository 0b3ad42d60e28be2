"""
StreamRegistry

Stream metadata (URL, title). Never read by the ledger itself.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wagerboard.exceptions import NotFoundError, ValidationError
from wagerboard.models import Stream


class StreamRegistry:

    async def list_streams(self, db: AsyncSession) -> list[Stream]:
        result = await db.execute(select(Stream).order_by(Stream.created_at))
        return list(result.scalars().all())

    async def get_stream(self, db: AsyncSession, stream_id: UUID) -> Stream:
        stream = await db.get(Stream, stream_id)
        if stream is None:
            raise NotFoundError(f"Stream {stream_id} not found")
        return stream

    async def create_stream(self, db: AsyncSession, url: str, title: str) -> Stream:
        stream = Stream(url=url, title=title)
        db.add(stream)
        await db.flush()
        await db.refresh(stream)
        return stream

    async def update_stream(
        self,
        db: AsyncSession,
        stream_id: UUID,
        url: Optional[str] = None,
        title: Optional[str] = None,
    ) -> Stream:
        if url is None and title is None:
            raise ValidationError("Nothing to update: provide url or title")

        stream = await self.get_stream(db, stream_id)
        if url is not None:
            stream.url = url
        if title is not None:
            stream.title = title
        await db.flush()
        await db.refresh(stream)
        return stream
