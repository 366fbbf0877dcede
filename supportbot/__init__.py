"""Telegram support desk relay: end users on one side, a support forum group on the other."""

__version__ = "0.1.0"
