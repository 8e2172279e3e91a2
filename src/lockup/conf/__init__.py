"""Lazy custody settings read from the host game's settings module.

Lockup shares the host's settings module instead of owning one: only names
starting with ``CUSTODY_`` are picked up, everything else in the module is
left to the host.

Usage:
    # In your game project's settings.py
    CUSTODY_SAVES_DIR = "saves"
    CUSTODY_RETENTION_DAYS = 14

    # In your game code
    from lockup.conf import settings

    print(settings.CUSTODY_RETENTION_DAYS)  # 14
"""

import importlib
import os
from typing import Any

from lockup.conf import global_settings

SETTINGS_MODULE_ENV = "LOCKUP_SETTINGS_MODULE"
SETTING_PREFIX = "CUSTODY_"


def _custody_names(module: object) -> list[str]:
    return [name for name in dir(module) if name.startswith(SETTING_PREFIX)]


class Settings:
    """Custody defaults from global_settings, overridable per attribute."""

    def __init__(self) -> None:
        for name in _custody_names(global_settings):
            setattr(self, name, getattr(global_settings, name))


class LazySettings:
    """Settings proxy that reads the host module on first attribute access.

    The module is named by the LOCKUP_SETTINGS_MODULE environment variable
    and defaults to "settings". A missing module means defaults only.
    """

    def __init__(self) -> None:
        self._wrapped: Settings | None = None

    def _setup(self) -> Settings:
        wrapped = Settings()
        try:
            module = importlib.import_module(os.environ.get(SETTINGS_MODULE_ENV, "settings"))
        except ImportError:
            module = None
        if module is not None:
            for name in _custody_names(module):
                setattr(wrapped, name, getattr(module, name))
        self._wrapped = wrapped
        return wrapped

    def __getattr__(self, name: str) -> Any:  # noqa: ANN401
        wrapped = self._wrapped if self._wrapped is not None else self._setup()
        return getattr(wrapped, name)

    def configure(self, **options: Any) -> None:  # noqa: ANN401
        """Override custody settings in code, e.g. from tests.

        Example:
            settings.configure(CUSTODY_AUTOSAVE_INTERVAL=5.0, CUSTODY_RETENTION_DAYS=1)
        """
        wrapped = self._wrapped if self._wrapped is not None else Settings()
        for name, value in options.items():
            setattr(wrapped, name, value)
        self._wrapped = wrapped

    def reset(self) -> None:
        """Forget loaded and configured values; the next access reloads them."""
        self._wrapped = None


settings = LazySettings()

__all__ = ["LazySettings", "Settings", "global_settings", "settings"]
