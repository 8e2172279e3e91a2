"""Small stand-ins for host objects used across the custody tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@dataclass
class FakeDefinition:
    id: str | None = None
    name: str | None = None
    legal_status: Any = None


@dataclass
class FakeItem:
    name: str | None = None
    id: str | None = None
    stack_count: int | None = None
    amount: int | None = None
    kind: str | None = "ItemInstance"
    definition: FakeDefinition | None = None


@dataclass
class FakeSlot:
    item_instance: Any = None


@dataclass
class FakeInventory:
    slots: list[Any] = field(default_factory=list)

    def list_slots(self) -> list[Any]:
        return self.slots


class BrokenInventory:
    def list_slots(self) -> list[Any]:
        msg = "inventory not ready"
        raise RuntimeError(msg)


class ExplodingSlot:
    @property
    def item_instance(self) -> Any:  # noqa: ANN401
        msg = "slot is being destroyed"
        raise RuntimeError(msg)


@dataclass
class FakeLayer:
    layer_path: str
    layer_tint: Any


@dataclass
class FakeAppearance:
    layers: list[FakeLayer] | None = field(default_factory=list)
    set_calls: list[list[tuple[str, tuple[float, float, float, float]]]] = field(default_factory=list)
    apply_count: int = 0

    def get_layers(self) -> list[FakeLayer] | None:
        return self.layers

    def set_layers(self, layers: list[tuple[str, tuple[float, float, float, float]]]) -> None:
        self.set_calls.append(layers)
        self.layers = [FakeLayer(path, tint) for path, tint in layers]

    def apply(self) -> None:
        self.apply_count += 1


@dataclass
class FakePlayer:
    name: str
    network_id: str | None = None
    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    inventory: Any = None
    appearance: Any = None
    last_vehicle_storage: Any = None
    time_since_vehicle_exit: float = 999.0
    crime_data: Any = None


def slot(name: str | None, **kwargs: Any) -> FakeSlot:  # noqa: ANN401
    """Build a populated slot holding an item called name."""
    legal_status = kwargs.pop("legal_status", None)
    definition = kwargs.pop("definition", None)
    if definition is None and legal_status is not None:
        definition = FakeDefinition(legal_status=legal_status)
    return FakeSlot(FakeItem(name=name, definition=definition, **kwargs))


def arrested_player_inventory() -> FakeInventory:
    """Cash, a legal pistol, ammunition and an illegal switchblade."""
    return FakeInventory(
        [
            slot("Cash", kind="CashInstance", amount=50),
            slot("9mm Pistol", id="pistol_9mm", stack_count=1, kind="WeaponItemInstance", legal_status=0),
            slot("9mm Ammo", id="ammo_9mm", stack_count=30, legal_status=0),
            slot("Switchblade", id="switchblade", stack_count=1, legal_status=2),
        ]
    )
