"""Frozen custody configuration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from lockup.conf import settings


@dataclass(frozen=True)
class CustodyConfig:
    """All knobs of the custody system, read once from settings.

    Attributes:
        save_key: Key of the durable slot.
        saves_dir: Directory of the key-value file.
        save_filename: Name of the key-value file.
        autosave_interval: Seconds between autosaves.
        retention: Age after which snapshots are purged.
        vehicle_exit_window: Seconds after leaving a vehicle during which its storage is seized.
        force_save_hotkey_enabled: Whether F5 forces a save.
    """

    save_key: str = "BehindBars_PlayerData"
    saves_dir: Path = Path("saves")
    save_filename: str = "custody.json"
    autosave_interval: float = 30.0
    retention: timedelta = timedelta(days=7)
    vehicle_exit_window: float = 30.0
    force_save_hotkey_enabled: bool = True

    @property
    def save_path(self) -> Path:
        """Absolute location of the key-value file."""
        saves_dir = self.saves_dir if self.saves_dir.is_absolute() else Path.cwd() / self.saves_dir
        return saves_dir / self.save_filename

    @classmethod
    def from_settings(cls) -> CustodyConfig:
        """Build a config from the current lockup settings."""
        return cls(
            save_key=settings.CUSTODY_SAVE_KEY,
            saves_dir=Path(settings.CUSTODY_SAVES_DIR),
            save_filename=settings.CUSTODY_SAVE_FILENAME,
            autosave_interval=float(settings.CUSTODY_AUTOSAVE_INTERVAL),
            retention=timedelta(days=settings.CUSTODY_RETENTION_DAYS),
            vehicle_exit_window=float(settings.CUSTODY_VEHICLE_EXIT_WINDOW),
            force_save_hotkey_enabled=bool(settings.CUSTODY_FORCE_SAVE_HOTKEY_ENABLED),
        )
