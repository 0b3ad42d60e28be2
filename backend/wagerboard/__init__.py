"""Wagerboard: wager ledger and leaderboard engine for live-stream betting."""

__version__ = "0.1.0"
__author__ = "Wagerboard Team"

__all__ = ["__version__", "__author__"]
