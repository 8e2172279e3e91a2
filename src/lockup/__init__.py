"""Lockup - arrest custody for games built on Arcade.

This package records what a player carried when arrested and gives the
legal part back on release:
- Item classification (contraband, weapons, ammunition, cash)
- One active snapshot per player, kept for seven days
- Civilian clothing capture and restore
- Write-through JSON persistence with periodic autosave

Quick start:
    from lockup import create_custody, setup_logging

    setup_logging()
    custody = create_custody()

    arrest_id = custody.create_inventory_snapshot(player)
    ...
    legal_items = custody.get_legal_items_for_player(player)
    custody.restore_player_clothing(player)
    custody.clear_player_snapshot(player)
"""

__version__ = "0.1.0"

from lockup.conf import settings
from lockup.events import EventBus
from lockup.helpers import create_custody, setup_logging
from lockup.systems import (
    BaseSystem,
    ClothingLayer,
    CustodyConfig,
    CustodyData,
    CustodyManager,
    GameContext,
    InventorySnapshot,
    SpecialHandling,
    StoredItem,
)

__all__ = [
    "BaseSystem",
    "ClothingLayer",
    "CustodyConfig",
    "CustodyData",
    "CustodyManager",
    "EventBus",
    "GameContext",
    "InventorySnapshot",
    "SpecialHandling",
    "StoredItem",
    "__version__",
    "create_custody",
    "settings",
    "setup_logging",
]
