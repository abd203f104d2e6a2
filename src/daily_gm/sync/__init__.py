"""Received-count synchronization: progress store, chunked scanner, synchronizer."""

from daily_gm.sync.progress import CacheProgressStore, ProgressStore, ScanProgress
from daily_gm.sync.scanner import ChunkedLogScanner, LogWindow, ScanResult, iter_windows
from daily_gm.sync.synchronizer import (
    CountSource,
    ReceivedCountSynchronizer,
    ReceivedCountTracker,
    SyncOutcome,
)

__all__ = [
    "CacheProgressStore",
    "ChunkedLogScanner",
    "CountSource",
    "LogWindow",
    "ProgressStore",
    "ReceivedCountSynchronizer",
    "ReceivedCountTracker",
    "ScanProgress",
    "ScanResult",
    "SyncOutcome",
    "iter_windows",
]
