"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from fakes import NOW

from lockup.conf import settings
from lockup.systems.custody.persistence import InMemoryKeyValueStore

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def configure_test_settings(tmp_path: Path) -> Generator[None]:
    """Configure settings for each test and reset them afterwards.

    Save files go to a per-test temporary directory so nothing is written to
    the working directory.
    """
    settings.configure(
        CUSTODY_SAVE_KEY="BehindBars_PlayerData",
        CUSTODY_SAVES_DIR=str(tmp_path / "saves"),
        CUSTODY_SAVE_FILENAME="custody.json",
        CUSTODY_AUTOSAVE_INTERVAL=30.0,
        CUSTODY_RETENTION_DAYS=7,
        CUSTODY_VEHICLE_EXIT_WINDOW=30.0,
        CUSTODY_FORCE_SAVE_HOTKEY_ENABLED=True,
    )
    yield
    settings.reset()


@pytest.fixture
def memory_store() -> InMemoryKeyValueStore:
    """Empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def clock() -> list[datetime]:
    """Mutable fixed clock; tests advance it by replacing element 0."""
    return [NOW]
