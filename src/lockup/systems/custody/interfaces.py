"""Capability interfaces the custody system consumes from the host game.

The host adapts its own player, inventory, avatar and storage objects to these
protocols. Optional data is modelled as ``None`` attributes rather than
discovered at runtime, so every fallback the collector applies is visible in
its code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from arcade.types import Color, Point3


class ItemDefinition(Protocol):
    """Static definition an item instance was created from."""

    id: str | None
    name: str | None
    legal_status: int | None  # 0 = legal, anything else is illegal


class ItemInstance(Protocol):
    """A concrete stack of items sitting in a slot.

    ``kind`` is the host's type label for the instance, e.g. "CashInstance",
    "ProductItemInstance" or "WeaponItemInstance".
    """

    id: str | None
    name: str | None
    stack_count: int | None
    amount: int | None
    kind: str | None
    definition: ItemDefinition | None


class ItemSlot(Protocol):
    """One inventory slot. Empty slots hold no item instance."""

    item_instance: ItemInstance | None


class InventorySource(Protocol):
    """Anything with slots: the player's inventory or a vehicle's trunk."""

    def list_slots(self) -> Sequence[ItemSlot | None]:
        """Return every slot, populated or not."""
        ...


class LayerSetting(Protocol):
    """A single body layer as the avatar system describes it."""

    layer_path: str
    layer_tint: tuple[float, float, float, float] | Color


class AppearanceProvider(Protocol):
    """Read and replace the body layers of an avatar."""

    def get_layers(self) -> Sequence[LayerSetting] | None:
        """Return the current layers in draw order, or None if unavailable."""
        ...

    def set_layers(self, layers: list[tuple[str, tuple[float, float, float, float]]]) -> None:
        """Replace all current layers with (path, rgba) pairs."""
        ...

    def apply(self) -> None:
        """Push pending layer changes to the rendered avatar."""
        ...


class KeyValueStore(Protocol):
    """A durable string store in the style of PlayerPrefs."""

    def set_string(self, key: str, value: str) -> None:
        """Stage a value for key."""
        ...

    def get_string(self, key: str) -> str | None:
        """Return the value stored for key, or None when absent."""
        ...

    def flush(self) -> None:
        """Make staged values durable."""
        ...


class PlayerHandle(Protocol):
    """The arrested player as the custody system sees it.

    Attributes:
        name: Display name; also the identity fallback and exit-position key.
        network_id: Stable multiplayer identity when available.
        position: World position at the time of the call.
        inventory: The player's own inventory, if reachable.
        appearance: Avatar layer access, if reachable.
        last_vehicle_storage: Storage of the last driven vehicle, if any.
        time_since_vehicle_exit: Seconds since the player left that vehicle.
        crime_data: Host object describing the player's crimes, JSON-serializable.
    """

    name: str
    network_id: str | None
    position: Point3
    inventory: InventorySource | None
    appearance: AppearanceProvider | None
    last_vehicle_storage: InventorySource | None
    time_since_vehicle_exit: float
    crime_data: Any


def resolve_player_id(player: PlayerHandle) -> str:
    """Return the identity key for player: network id when set, else the name."""
    network_id = getattr(player, "network_id", None)
    if network_id:
        return str(network_id)
    return player.name
