"""Sync exchange SDK examples into the crypto API examples repository."""

__version__ = "1.0.0"
