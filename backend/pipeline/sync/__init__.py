"""Synchronization backend history access."""

from pipeline.sync.client import (
    HistoryBackend,
    HistoryItem,
    SyncHistoryClient,
    fetch_snapshots,
)

__all__ = ["HistoryBackend", "HistoryItem", "SyncHistoryClient", "fetch_snapshots"]
