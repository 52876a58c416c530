"""Persistence collaborators: where accepted records go and where dedup looks."""

from .base import RecordStore, StoreError
from .json_store import JsonFileStore
from .memory import InMemoryStore

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "RecordStore",
    "StoreError",
]
