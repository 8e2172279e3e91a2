"""Data model and base class for the custody system."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from arcade.types import Color

from lockup.systems.base import BaseSystem

if TYPE_CHECKING:
    from arcade.types import Point3

    from lockup.systems.custody.interfaces import PlayerHandle

SCHEMA_VERSION = 1

Position = tuple[float, float, float]


class CustodyDataError(ValueError):
    """Raised when persisted custody data cannot be decoded."""


class SpecialHandling(Enum):
    """Extra processing a stored item needs when it is handed back."""

    NONE = ""
    EMPTY_WEAPON = "empty_weapon"  # returned without any ammunition loaded


def _parse_time(value: Any) -> datetime:  # noqa: ANN401
    if not isinstance(value, str):
        msg = f"Expected ISO 8601 timestamp, got {value!r}"
        raise CustodyDataError(msg)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        msg = f"Invalid timestamp: {value!r}"
        raise CustodyDataError(msg) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _parse_position(value: Any) -> Position:  # noqa: ANN401
    if not isinstance(value, (list, tuple)) or len(value) != 3:  # noqa: PLR2004
        msg = f"Expected [x, y, z], got {value!r}"
        raise CustodyDataError(msg)
    x, y, z = (float(v) for v in value)
    return (x, y, z)


def to_position(point: Point3) -> Position:
    """Convert any 3-component point to a tuple of floats."""
    x, y, z = point
    return (float(x), float(y), float(z))


@dataclass(frozen=True)
class StoredItem:
    """One seized item as recorded at the moment of arrest.

    Cash and ammunition never become StoredItems, so ``cash_balance`` stays at
    0.0; it is kept so saved payloads keep their full shape.

    Attributes:
        item_id: Item id, "unknown" when the host exposed none.
        item_name: Display name at the time of seizure.
        stack_count: How many were in the slot, always at least 1.
        is_contraband: True when the item is kept as evidence instead of returned.
        item_type: Host type label of the item instance.
        confiscation_time: When the item was seized (UTC).
        special_handling: EMPTY_WEAPON for firearms handed back unloaded.
        cash_balance: Reserved.
    """

    item_id: str
    item_name: str
    stack_count: int
    is_contraband: bool
    item_type: str
    confiscation_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    special_handling: SpecialHandling = SpecialHandling.NONE
    cash_balance: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "itemId": self.item_id,
            "itemName": self.item_name,
            "stackCount": self.stack_count,
            "isContraband": self.is_contraband,
            "itemType": self.item_type,
            "confiscationTime": self.confiscation_time.isoformat(),
            "specialHandling": self.special_handling.value,
            "cashBalance": self.cash_balance,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StoredItem:
        """Create from dictionary loaded from JSON."""
        try:
            special_handling = SpecialHandling(data.get("specialHandling") or "")
        except ValueError as e:
            msg = f"Unknown special handling: {data.get('specialHandling')!r}"
            raise CustodyDataError(msg) from e
        return cls(
            item_id=str(data.get("itemId", "unknown")),
            item_name=str(data.get("itemName", "Unknown Item")),
            stack_count=max(1, int(data.get("stackCount", 1))),
            is_contraband=bool(data.get("isContraband", False)),
            item_type=str(data.get("itemType", "Unknown")),
            confiscation_time=_parse_time(data.get("confiscationTime")),
            special_handling=special_handling,
            cash_balance=float(data.get("cashBalance", 0.0)),
        )


@dataclass(frozen=True)
class ClothingLayer:
    """One body layer of the player's civilian outfit.

    Attributes:
        layer_path: Avatar resource path of the layer.
        color_rgba: Tint as four normalized floats.
    """

    layer_path: str
    color_rgba: tuple[float, float, float, float]

    @property
    def color(self) -> Color:
        """Tint as an arcade Color."""
        return Color.from_normalized(self.color_rgba)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"layerPath": self.layer_path, "colorRGBA": list(self.color_rgba)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClothingLayer:
        """Create from dictionary loaded from JSON. Missing channels default to 1.0."""
        rgba = [float(v) for v in data.get("colorRGBA", [])][:4]
        rgba += [1.0] * (4 - len(rgba))
        return cls(layer_path=str(data.get("layerPath", "")), color_rgba=(rgba[0], rgba[1], rgba[2], rgba[3]))


@dataclass
class InventorySnapshot:
    """Everything taken from one player during one arrest.

    Only ``is_active`` ever changes after creation: it flips to False when the
    player is released. Inactive snapshots stay on record until the retention
    sweep removes them.
    """

    player_id: str
    player_name: str
    arrest_id: str
    items: list[StoredItem] = field(default_factory=list)
    original_clothing: list[ClothingLayer] = field(default_factory=list)
    last_position: Position = (0.0, 0.0, 0.0)
    arrest_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    is_active: bool = True
    crime_data: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "playerId": self.player_id,
            "playerName": self.player_name,
            "items": [item.to_dict() for item in self.items],
            "originalClothing": [layer.to_dict() for layer in self.original_clothing],
            "lastPosition": list(self.last_position),
            "arrestTime": self.arrest_time.isoformat(),
            "arrestId": self.arrest_id,
            "isActive": self.is_active,
            "crimeData": self.crime_data,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InventorySnapshot:
        """Create from dictionary loaded from JSON."""
        if "playerId" not in data or "arrestId" not in data:
            msg = "Snapshot entry is missing playerId or arrestId"
            raise CustodyDataError(msg)
        crime_data = data.get("crimeData")
        return cls(
            player_id=str(data["playerId"]),
            player_name=str(data.get("playerName", "")),
            arrest_id=str(data["arrestId"]),
            items=[StoredItem.from_dict(item) for item in data.get("items", [])],
            original_clothing=[ClothingLayer.from_dict(layer) for layer in data.get("originalClothing", [])],
            last_position=_parse_position(data.get("lastPosition", [0.0, 0.0, 0.0])),
            arrest_time=_parse_time(data.get("arrestTime")),
            is_active=bool(data.get("isActive", False)),
            crime_data=None if crime_data is None else str(crime_data),
        )


@dataclass
class CustodyData:
    """Schema root: all durable custody state.

    Attributes:
        snapshots: Every snapshot in creation order.
        exit_positions: Player name to the position they should be released at.
        last_save_time: When this data was last written (UTC), None if never.
        version: Payload format version.
    """

    snapshots: list[InventorySnapshot] = field(default_factory=list)
    exit_positions: dict[str, Position] = field(default_factory=dict)
    last_save_time: datetime | None = None
    version: int = SCHEMA_VERSION

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "playerSnapshots": [snapshot.to_dict() for snapshot in self.snapshots],
            "storedExitPositions": {name: list(pos) for name, pos in self.exit_positions.items()},
            "lastSaveTime": self.last_save_time.isoformat() if self.last_save_time else None,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CustodyData:
        """Create from dictionary loaded from JSON.

        Raises:
            CustodyDataError: If any part of the payload is malformed.
        """
        if not isinstance(data, dict):
            msg = f"Expected a JSON object, got {type(data).__name__}"
            raise CustodyDataError(msg)
        try:
            last_save = data.get("lastSaveTime")
            return cls(
                snapshots=[InventorySnapshot.from_dict(entry) for entry in data.get("playerSnapshots") or []],
                exit_positions={
                    str(name): _parse_position(pos) for name, pos in (data.get("storedExitPositions") or {}).items()
                },
                last_save_time=_parse_time(last_save) if last_save is not None else None,
                version=int(data.get("version", SCHEMA_VERSION)),
            )
        except CustodyDataError:
            raise
        except (AttributeError, KeyError, OverflowError, TypeError, ValueError) as e:
            msg = f"Malformed custody data: {e}"
            raise CustodyDataError(msg) from e


class CustodyBaseManager(BaseSystem, ABC):
    """Base class for CustodyManager."""

    role = "custody_manager"

    @abstractmethod
    def create_inventory_snapshot(self, player: PlayerHandle | None) -> str | None:
        """Seize the player's belongings and clothing; return the arrest id."""
        ...

    @abstractmethod
    def get_legal_items_for_player(self, player: PlayerHandle | str | None) -> list[StoredItem]:
        """Items to hand back on release."""
        ...

    @abstractmethod
    def get_contraband_items_for_player(self, player: PlayerHandle | str | None) -> list[StoredItem]:
        """Items kept as evidence."""
        ...

    @abstractmethod
    def clear_player_snapshot(self, player: PlayerHandle | str | None) -> None:
        """Mark the player's active snapshot as released."""
        ...

    @abstractmethod
    def restore_player_clothing(self, player: PlayerHandle | None) -> bool:
        """Put the player's captured civilian clothing back on."""
        ...

    @abstractmethod
    def store_player_exit_position(self, player_name: str, position: Point3) -> None:
        """Remember where the player should reappear."""
        ...

    @abstractmethod
    def get_player_exit_position(self, player_name: str) -> Position | None:
        """Position stored for the player, if any."""
        ...
