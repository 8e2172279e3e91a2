"""Turn the contents of inventory slots into stored-item records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lockup.systems.custody.base import SpecialHandling, StoredItem
from lockup.systems.custody.classifier import ItemDisposition, categorize, is_contraband

if TYPE_CHECKING:
    from lockup.systems.custody.interfaces import InventorySource, ItemInstance, ItemSlot

logger = logging.getLogger(__name__)

UNKNOWN_ID = "unknown"
UNKNOWN_NAME = "Unknown Item"
UNKNOWN_KIND = "Unknown"


def extract_item_id(item: ItemInstance) -> str:
    """Instance id, then definition id, then "unknown"."""
    if item.id:
        return str(item.id)
    definition = item.definition
    if definition is not None and definition.id:
        return str(definition.id)
    logger.warning("Could not extract an id from item instance")
    return UNKNOWN_ID


def extract_item_name(item: ItemInstance) -> str:
    """Instance name, then definition name, then the item id."""
    try:
        if item.name:
            return str(item.name)
        definition = item.definition
        if definition is not None and definition.name:
            return str(definition.name)
        return extract_item_id(item)
    except Exception:  # noqa: BLE001
        return UNKNOWN_NAME


def extract_stack_count(item: ItemInstance) -> int:
    """Stack count, then amount, then 1. Only positive integers are accepted."""
    for count in (item.stack_count, item.amount):
        if isinstance(count, int) and not isinstance(count, bool) and count > 0:
            return count
    return 1


def extract_item_kind(item: ItemInstance) -> str:
    return item.kind or UNKNOWN_KIND


class InventoryCollector:
    """Build StoredItem records from inventory slots.

    Each populated slot is classified and then either stored or discarded:
    cash and ammunition are discarded, weapons are stored marked for an
    unloaded return, everything else is stored with its contraband flag.

    A slot that cannot be read is skipped; the rest of the batch still goes
    through. If the source itself cannot list its slots nothing is collected.
    """

    def collect(self, source: InventorySource, vehicle_source: InventorySource | None = None) -> list[StoredItem]:
        """Collect every storable item from source, then from vehicle_source if given.

        Args:
            source: The player's inventory.
            vehicle_source: Storage of a vehicle the player just left, already
                checked against the exit window by the caller.

        Returns:
            Stored items in slot order, inventory first.
        """
        try:
            slots = list(source.list_slots())
        except Exception:
            logger.exception("Could not enumerate inventory slots")
            return []

        logger.debug("Found %d inventory slots to check", len(slots))
        items = self._collect_slots(slots)

        if vehicle_source is not None:
            items.extend(self._collect_vehicle(vehicle_source))

        logger.info("Collected %d items", len(items))
        return items

    def _collect_vehicle(self, vehicle_source: InventorySource) -> list[StoredItem]:
        try:
            slots = list(vehicle_source.list_slots())
        except Exception as e:  # noqa: BLE001
            logger.debug("Could not enumerate vehicle storage: %s", e)
            return []

        vehicle_items = self._collect_slots(slots)
        logger.info("Collected %d items from vehicle storage", len(vehicle_items))
        return vehicle_items

    def _collect_slots(self, slots: list[ItemSlot | None]) -> list[StoredItem]:
        items: list[StoredItem] = []
        for slot in slots:
            if slot is None:
                continue
            stored = self.process_slot(slot)
            if stored is not None:
                items.append(stored)
        return items

    def process_slot(self, slot: ItemSlot) -> StoredItem | None:
        """Convert one slot into a StoredItem.

        Returns:
            The stored item, or None for empty slots, cash, ammunition and
            slots that could not be read.
        """
        try:
            item = slot.item_instance
            if item is None:
                return None

            item_id = extract_item_id(item)
            item_name = extract_item_name(item)
            stack_count = extract_stack_count(item)
            item_kind = extract_item_kind(item)
            contraband = is_contraband(item)
            logger.debug(
                "Extracted item name=%r id=%r stack=%d kind=%s contraband=%s",
                item_name,
                item_id,
                stack_count,
                item_kind,
                contraband,
            )

            disposition = categorize(item_name, item_kind, contraband=contraband)
            if disposition is ItemDisposition.CASH_EXCLUDED:
                logger.info("Skipping cash - money is not confiscated")
                return None
            if disposition is ItemDisposition.AMMO_SPECIAL:
                logger.info("Confiscating ammo permanently: %s (x%d)", item_name, stack_count)
                return None

            special_handling = SpecialHandling.NONE
            if disposition is ItemDisposition.WEAPON_SPECIAL:
                special_handling = SpecialHandling.EMPTY_WEAPON
                logger.info("Captured weapon: %s - will be returned empty", item_name)

            return StoredItem(
                item_id=item_id,
                item_name=item_name,
                stack_count=stack_count,
                is_contraband=contraband,
                item_type=item_kind,
                special_handling=special_handling,
            )
        except Exception as e:  # noqa: BLE001
            logger.debug("Error processing inventory slot: %s", e)
            return None
