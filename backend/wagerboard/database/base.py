"""Declarative base for all Wagerboard tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
