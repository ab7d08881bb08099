"""Ballot API: election voting service with admin-managed positions and live results."""

__version__ = "0.1.0"
