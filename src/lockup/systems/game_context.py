"""Game context shared by all systems.

The GameContext is a small registry holding the event bus and every
registered system. Systems find each other through it instead of through
module-level singletons, which keeps them testable: a test builds a context,
registers the system under test and mocks for everything else.

Example usage:
    context = GameContext(event_bus=EventBus())
    context.register_system("custody", custody_manager)

    custody = context.get_system("custody")
    custody.create_inventory_snapshot(player)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lockup.events import EventBus
    from lockup.systems.base import BaseSystem
    from lockup.systems.custody.base import CustodyBaseManager


class GameContext:
    """Central context object providing access to all game systems.

    Attributes:
        event_bus: Publish/subscribe event system for decoupled communication.
        custody_manager: Set when a system with role "custody_manager" registers.
    """

    custody_manager: CustodyBaseManager

    def __init__(self, event_bus: EventBus) -> None:
        """Initialize the context.

        Args:
            event_bus: Central event system for publishing and subscribing to game events.
        """
        self.event_bus = event_bus
        self._systems: dict[str, BaseSystem] = {}

    def register_system(self, name: str, system: BaseSystem) -> None:
        """Register a system and expose it under its role attribute, if it has one."""
        self._systems[name] = system

        if system.role:
            setattr(self, system.role, system)

    def get_system(self, name: str) -> BaseSystem | None:
        """Get a registered system by name, or None if it is not registered."""
        return self._systems.get(name)

    def get_systems(self) -> dict[str, BaseSystem]:
        """Get all registered systems."""
        return self._systems
