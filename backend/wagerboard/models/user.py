"""User directory model."""

from sqlalchemy import Column, String

from wagerboard.database.base import Base
from wagerboard.models.base import TimestampMixin


class User(Base, TimestampMixin):
    """Bettor profile. Only the name is read by the ledger."""

    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    twitch_username = Column(String(100), nullable=False, unique=True)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<User {self.id} {self.display_name}>"
