"""Persistence for rebalancer and registry records."""

from .storage import KeyValueStore, MemoryStore, DiskStore, StorageKeys, create_store

__all__ = ["KeyValueStore", "MemoryStore", "DiskStore", "StorageKeys", "create_store"]
