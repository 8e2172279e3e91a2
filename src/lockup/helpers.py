"""Helper functions for wiring Lockup into a game.

Most hosts only need create_custody(): it builds the manager, registers it
with the game context and runs its setup.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.logging import RichHandler

from lockup.events import EventBus
from lockup.systems.custody import CustodyManager
from lockup.systems.game_context import GameContext

if TYPE_CHECKING:
    from lockup.systems.custody.interfaces import KeyValueStore


def setup_logging(log_level: str = "INFO") -> None:
    """Configure logging for the host.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    Side effects:
        - Configures the root logger with RichHandler
        - Sets the specified log level
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, markup=True)],
    )


def create_custody(context: GameContext | None = None, store: KeyValueStore | None = None) -> CustodyManager:
    """Create a CustodyManager and register it with a game context.

    Args:
        context: Context to register with. A new one with its own EventBus is
            created when None.
        store: Durable key-value store. Defaults to the JSON file configured in
            settings.

    Returns:
        The set-up manager, also reachable as ``context.custody_manager``.

    Example:
        >>> custody = create_custody(context)
        >>> custody.create_inventory_snapshot(player)
    """
    if context is None:
        context = GameContext(event_bus=EventBus())

    custody = CustodyManager(store=store)
    context.register_system(custody.name, custody)
    custody.setup(context)
    return custody
