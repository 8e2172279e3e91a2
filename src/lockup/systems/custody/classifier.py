"""Item classification rules applied when a player is booked.

Every seized item falls into exactly one disposition:

- CASH_EXCLUDED: money is never confiscated and is not recorded at all.
- WEAPON_SPECIAL: firearms are recorded and handed back unloaded.
- AMMO_SPECIAL: ammunition, magazines and clips are destroyed, not recorded.
- CONTRABAND: recorded and kept as evidence.
- LEGAL: recorded and handed back on release.

The checks run in that order, so a "Shotgun Shell Box" counts as a weapon
and a "Cash Register Key" is never stored. Weapon and ammo detection are
plain case-insensitive substring tests against the literal token tables
below, matched against both the display name and the host's type label.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lockup.systems.custody.interfaces import ItemInstance

logger = logging.getLogger(__name__)

CASH_KIND = "CashInstance"
CASH_NAME_TOKEN = "cash"
PRODUCT_KIND_MARKER = "ProductItemInstance"

WEAPON_TOKENS = ("pistol", "gun", "rifle", "shotgun", "weapon", "firearm")
AMMO_TOKENS = ("ammo", "ammunition", "bullet", "round", "cartridge", "shell", "magazine", "mag", "clip")

LEGAL_STATUS_LEGAL = 0


class ItemDisposition(Enum):
    """What happens to an item at booking."""

    LEGAL = auto()
    CONTRABAND = auto()
    WEAPON_SPECIAL = auto()
    AMMO_SPECIAL = auto()
    CASH_EXCLUDED = auto()


def _matches(tokens: tuple[str, ...], item_name: str, item_kind: str | None) -> bool:
    if not item_name:
        return False
    name = item_name.lower()
    kind = (item_kind or "").lower()
    return any(token in name or token in kind for token in tokens)


def is_cash_item(item_name: str, item_kind: str | None) -> bool:
    """True for the cash instance type or anything named like cash."""
    return item_kind == CASH_KIND or CASH_NAME_TOKEN in (item_name or "").lower()


def is_weapon_item(item_name: str, item_kind: str | None) -> bool:
    """True if the name or type label contains a weapon token."""
    return _matches(WEAPON_TOKENS, item_name, item_kind)


def is_ammo_item(item_name: str, item_kind: str | None) -> bool:
    """True if the name or type label contains an ammunition token."""
    return _matches(AMMO_TOKENS, item_name, item_kind)


def is_product_item(item: ItemInstance) -> bool:
    """True for drug products, packaged or not."""
    return PRODUCT_KIND_MARKER in (item.kind or "")


def is_contraband(item: ItemInstance) -> bool:
    """Decide whether an item is illegal to possess.

    Products are always contraband; packaging only changes how they look, not
    their legal status. Every other item uses its definition's legal status
    code, where 0 means legal. When the status is missing or cannot be read
    the item counts as legal, so unknown item types are not over-confiscated.

    Args:
        item: The item instance to classify.

    Returns:
        True if the item is contraband.
    """
    try:
        if is_product_item(item):
            return True

        definition = item.definition
        status = definition.legal_status if definition is not None else None
        if isinstance(status, Enum):
            status = status.value
        if status is None:
            return False
        return int(status) != LEGAL_STATUS_LEGAL
    except Exception as e:  # noqa: BLE001
        logger.debug("Could not read legal status, treating item as legal: %s", e)
        return False


def categorize(item_name: str, item_kind: str | None, *, contraband: bool) -> ItemDisposition:
    """Combine the special-case tables with a contraband flag into a disposition."""
    if is_cash_item(item_name, item_kind):
        return ItemDisposition.CASH_EXCLUDED
    if is_weapon_item(item_name, item_kind):
        return ItemDisposition.WEAPON_SPECIAL
    if is_ammo_item(item_name, item_kind):
        return ItemDisposition.AMMO_SPECIAL
    return ItemDisposition.CONTRABAND if contraband else ItemDisposition.LEGAL
