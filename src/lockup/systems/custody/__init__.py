"""Custody system for arrest-time inventory and clothing snapshots.

This package provides:
- CustodyManager: The system hosts register and call
- Classifier rules and InventoryCollector: what is seized, returned or destroyed
- ClothingVault: civilian outfit capture and restore
- SnapshotStore and PersistenceGateway: durable snapshot storage
- sweep_expired: retention purge applied on load
"""

from lockup.systems.custody.base import (
    ClothingLayer,
    CustodyData,
    CustodyDataError,
    InventorySnapshot,
    SpecialHandling,
    StoredItem,
)
from lockup.systems.custody.classifier import ItemDisposition, categorize, is_contraband
from lockup.systems.custody.clothing import ClothingVault
from lockup.systems.custody.collector import InventoryCollector
from lockup.systems.custody.config import CustodyConfig
from lockup.systems.custody.manager import CustodyManager
from lockup.systems.custody.persistence import InMemoryKeyValueStore, JsonFileKeyValueStore, PersistenceGateway
from lockup.systems.custody.retention import sweep_expired
from lockup.systems.custody.store import SnapshotStore

__all__ = [
    "ClothingLayer",
    "ClothingVault",
    "CustodyConfig",
    "CustodyData",
    "CustodyDataError",
    "CustodyManager",
    "InMemoryKeyValueStore",
    "InventoryCollector",
    "InventorySnapshot",
    "ItemDisposition",
    "JsonFileKeyValueStore",
    "PersistenceGateway",
    "SnapshotStore",
    "SpecialHandling",
    "StoredItem",
    "categorize",
    "is_contraband",
    "sweep_expired",
]
