"""Default settings for Lockup.

Users can override these in their project's settings.py file.

Example:
    # In your project's settings.py:
    CUSTODY_SAVES_DIR = "data/saves"
    CUSTODY_AUTOSAVE_INTERVAL = 60.0
"""

# Persistence settings
CUSTODY_SAVE_KEY = "BehindBars_PlayerData"
"""Key of the durable slot holding all custody data."""

CUSTODY_SAVES_DIR = "saves"
"""Directory (relative to the working directory) for the key-value file."""

CUSTODY_SAVE_FILENAME = "custody.json"
"""Name of the key-value file inside CUSTODY_SAVES_DIR."""

CUSTODY_AUTOSAVE_INTERVAL = 30.0
"""Seconds of game time between periodic autosaves."""

# Retention settings
CUSTODY_RETENTION_DAYS = 7
"""Snapshots whose arrest is older than this are purged on load."""

# Collection settings
CUSTODY_VEHICLE_EXIT_WINDOW = 30.0
"""Seconds after leaving a vehicle during which its storage is also seized."""

# Debug settings
CUSTODY_FORCE_SAVE_HOTKEY_ENABLED = True
"""Whether F5 forces a custody save."""
