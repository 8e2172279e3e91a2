"""Purge snapshots that are past the retention window."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from lockup.systems.custody.base import CustodyData

logger = logging.getLogger(__name__)

DEFAULT_RETENTION = timedelta(days=7)


def sweep_expired(data: CustodyData, now: datetime, retention: timedelta = DEFAULT_RETENTION) -> int:
    """Remove every snapshot arrested before ``now - retention``.

    Active snapshots are removed too: a player who has not been released
    within the window loses the record along with everything else.

    Args:
        data: Schema root to sweep in place.
        now: Current time (UTC).
        retention: Maximum age of a snapshot.

    Returns:
        Number of snapshots removed.
    """
    cutoff = now - retention
    kept = [snapshot for snapshot in data.snapshots if snapshot.arrest_time >= cutoff]
    removed = len(data.snapshots) - len(kept)
    if removed:
        data.snapshots[:] = kept
        logger.info("Cleaned up %d old inventory snapshots", removed)
    return removed
