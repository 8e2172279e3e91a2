"""Capture and restore the player's civilian outfit.

At booking the current body layers are copied so prison attire can replace
them; on release the copy is written back in its original order.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from arcade.types import Color

from lockup.systems.custody.base import ClothingLayer

if TYPE_CHECKING:
    from lockup.systems.custody.base import InventorySnapshot
    from lockup.systems.custody.interfaces import AppearanceProvider, LayerSetting

logger = logging.getLogger(__name__)


def _normalized_tint(layer: LayerSetting) -> tuple[float, float, float, float]:
    tint = layer.layer_tint
    if isinstance(tint, Color):
        return tint.normalized
    r, g, b, a = tint
    return (float(r), float(g), float(b), float(a))


class ClothingVault:
    """Copies avatar layers in and out of snapshots."""

    def capture(self, provider: AppearanceProvider | None) -> list[ClothingLayer]:
        """Copy every current body layer.

        Arrest goes ahead without clothing when the avatar is unavailable, so
        this never raises.

        Args:
            provider: The player's appearance, or None if it could not be found.

        Returns:
            Layers in draw order, or an empty list.
        """
        if provider is None:
            logger.warning("Could not find player appearance for clothing capture")
            return []

        try:
            layers = provider.get_layers()
            if layers is None:
                logger.warning("Player appearance has no body layers")
                return []
            captured = [ClothingLayer(layer.layer_path, _normalized_tint(layer)) for layer in layers]
        except Exception:
            logger.exception("Error capturing player clothing")
            return []

        logger.info("Captured %d clothing layers", len(captured))
        return captured

    def restore(self, snapshot: InventorySnapshot | None, provider: AppearanceProvider | None) -> bool:
        """Replace the avatar's layers with the ones captured in snapshot.

        Nothing to restore is not an error: without an active snapshot, or with
        one that holds no layers, the avatar is left as is.

        Returns:
            True if the captured outfit was applied.
        """
        if snapshot is None or not snapshot.original_clothing:
            logger.warning("No clothing data saved for player")
            return False

        if provider is None:
            logger.error("Could not find player appearance for clothing restoration")
            return False

        try:
            provider.set_layers([(layer.layer_path, layer.color_rgba) for layer in snapshot.original_clothing])
            provider.apply()
        except Exception:
            logger.exception("Error restoring player clothing")
            return False

        logger.info("Restored %d clothing layers for %s", len(snapshot.original_clothing), snapshot.player_name)
        return True
