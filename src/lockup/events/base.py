"""Event system for decoupled custody notifications.

Publishers emit events without knowing who handles them; subscribers react
without knowing who published. The custody manager publishes when snapshots
are created or cleared so hosts can show notifications, move the player to
the cell, or trigger release scripts.

Example usage:
    event_bus = EventBus()

    def on_created(event: InventorySnapshotCreatedEvent):
        print(f"Seized {event.item_count} items from {event.player_name}")

    event_bus.subscribe(InventorySnapshotCreatedEvent, on_created)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class Event:
    """Base event class."""

    def get_script_data(self) -> dict[str, Any]:
        """Get data for script triggers."""
        return {}


@dataclass
class InventorySnapshotCreatedEvent(Event):
    """Fired after a player's belongings were seized and saved.

    Attributes:
        player_id: Identity key the snapshot was stored under.
        player_name: Display name of the arrested player.
        arrest_id: Unique id of the new snapshot.
        item_count: Number of items stored (cash and ammo are never counted).
    """

    player_id: str
    player_name: str
    arrest_id: str
    item_count: int

    def get_script_data(self) -> dict[str, Any]:
        """Get data for script triggers."""
        return {"player": self.player_name, "arrest_id": self.arrest_id, "items": self.item_count}


@dataclass
class InventorySnapshotClearedEvent(Event):
    """Fired when a player's active snapshot is released.

    Attributes:
        player_id: Identity key of the released player.
        arrest_id: Id of the snapshot that was deactivated.
    """

    player_id: str
    arrest_id: str

    def get_script_data(self) -> dict[str, Any]:
        """Get data for script triggers."""
        return {"player_id": self.player_id, "arrest_id": self.arrest_id}


@dataclass
class ClothingRestoredEvent(Event):
    """Fired after a player's civilian clothing was put back on."""

    player_id: str
    layer_count: int

    def get_script_data(self) -> dict[str, Any]:
        """Get data for script triggers."""
        return {"player_id": self.player_id, "layers": self.layer_count}


@dataclass
class CustodyDataClearedEvent(Event):
    """Fired when all persistent custody data was wiped."""


class EventBus:
    """Central event bus for publish/subscribe event handling.

    Thread safety: This implementation is NOT thread-safe. All subscribe,
    publish, and unsubscribe calls should happen on the main game thread.
    """

    def __init__(self) -> None:
        """Initialize the event bus with no registered listeners."""
        self.listeners: dict[type[Event], list[Callable[[Event], None]]] = {}

    def subscribe(self, event_type: type[Event], handler: Callable[[Event], None]) -> None:
        """Subscribe a handler to an event type.

        Handlers for the same type are called in registration order. The same
        handler may be subscribed more than once.

        Args:
            event_type: The type of event to listen for.
            handler: Callback taking the event as its only argument.
        """
        self.listeners.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: type[Event], handler: Callable[[Event], None]) -> None:
        """Remove every subscription of handler for event_type. Unknown handlers are ignored."""
        if event_type in self.listeners:
            self.listeners[event_type] = [h for h in self.listeners[event_type] if h != handler]

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribed handlers.

        Handlers run synchronously. An exception in a handler propagates and
        stops later handlers from running.

        Args:
            event: The event instance to publish.
        """
        for handler in self.listeners.get(type(event), []):
            handler(event)

    def clear(self) -> None:
        """Clear all event listeners."""
        self.listeners.clear()

    def unregister_all(self, subscriber: object) -> None:
        """Unregister all bound-method handlers belonging to subscriber."""
        for event_type in self.listeners:
            self.listeners[event_type] = [
                h for h in self.listeners[event_type] if getattr(h, "__self__", None) is not subscriber
            ]
