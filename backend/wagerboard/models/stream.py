"""Stream registry model."""

from sqlalchemy import Column, String

from wagerboard.database.base import Base
from wagerboard.models.base import TimestampMixin, UUIDMixin


class Stream(Base, UUIDMixin, TimestampMixin):
    """Live stream that wagers can target."""

    __tablename__ = "streams"

    url = Column(String(2048), nullable=False)
    title = Column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Stream {self.title}>"
