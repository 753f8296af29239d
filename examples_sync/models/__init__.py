"""Data models for the examples sync system."""

from .config import (
    EXCHANGE_CONFIGS,
    ExchangeConfig,
    SyncConfig,
    SyncPaths,
    SyncSettings,
    UnknownExchangeError,
    get_exchange_config,
)
from .example_index import ExampleFile, ExampleFolder, ExampleMetadata

__all__ = [
    "EXCHANGE_CONFIGS",
    "ExampleFile",
    "ExampleFolder",
    "ExampleMetadata",
    "ExchangeConfig",
    "SyncConfig",
    "SyncPaths",
    "SyncSettings",
    "UnknownExchangeError",
    "get_exchange_config",
]
