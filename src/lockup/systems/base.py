"""Base class for pluggable systems.

Systems are the building blocks a host game loop drives: each one handles a
specific concern, is set up with a GameContext, ticked every frame and
cleaned up when the game exits.

Example:
    Creating a custom system::

        class CurfewManager(BaseSystem):
            name = "curfew"
            role = "curfew_manager"

            def setup(self, context):
                self.context = context

            def update(self, delta_time, context):
                self.clock += delta_time
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from lockup.systems.game_context import GameContext


class BaseSystem(ABC):
    """Base class for all pluggable systems.

    Attributes:
        name: Unique identifier for the system. Must be defined as a class variable.
        role: Attribute name under which GameContext exposes the system
            (e.g. ``context.custody_manager``). Empty for systems that are only
            reachable through get_system().
        dependencies: Names of systems this one needs to be registered first.
    """

    name: ClassVar[str]
    role: ClassVar[str] = ""
    dependencies: ClassVar[list[str]] = []

    @abstractmethod
    def setup(self, context: GameContext) -> None:
        """Initialize the system once the context is available.

        Use it to keep a reference to the context, subscribe to events and
        read configuration.

        Args:
            context: Game context providing access to other systems via get_system().
        """

    def update(self, delta_time: float, context: GameContext) -> None:  # noqa: B027
        """Called every frame during the game loop.

        Args:
            delta_time: Time elapsed since the last frame, in seconds.
            context: Game context providing access to other systems.
        """

    def cleanup(self) -> None:  # noqa: B027
        """Called when the game exits. Release resources and unsubscribe here."""

    def on_key_press(self, symbol: int, modifiers: int, context: GameContext) -> bool:
        """Handle key press events.

        Args:
            symbol: Arcade key constant for the pressed key.
            modifiers: Bitfield of modifier keys held.
            context: Game context providing access to other systems.

        Returns:
            True if the event was handled and should stop propagating, False otherwise.
        """
        return False
