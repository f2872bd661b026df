"""Calculation history storage module."""

from median.store.interface import HistoryFilter, HistoryStore
from median.store.memory_store import MemoryHistoryStore

__all__ = [
    "HistoryFilter",
    "HistoryStore",
    "MemoryHistoryStore",
]
