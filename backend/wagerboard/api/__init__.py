"""HTTP transport for the wager ledger."""

from wagerboard.api.server import create_app

__all__ = ["create_app"]
