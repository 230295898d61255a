"""Pending delayed grab.

The scheduler never fires anything itself. Whoever executes grabs reads
``pending`` (or asks ``is_due``) and calls ``disarm`` once done.
"""

import logging
import time
from typing import Callable, Optional

from pickban.models.auto_select import PendingGrab

logger = logging.getLogger(__name__)


class GrabScheduler:
    """Holds at most one pending grab."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._pending: Optional[PendingGrab] = None

    @property
    def pending(self) -> Optional[PendingGrab]:
        return self._pending

    def arm(self, champion_id: int, delay_seconds: float) -> PendingGrab:
        """Schedule a grab, replacing whatever was pending.

        Re-arming restarts the wait from now.

        Raises:
            ValueError: If delay_seconds is negative
        """
        if delay_seconds < 0:
            raise ValueError(f"delay_seconds must be non-negative, got {delay_seconds}")

        self._pending = PendingGrab(
            champion_id=champion_id,
            will_grab_at=self._clock() + delay_seconds,
        )
        logger.info(f"Grab armed for champion {champion_id} in {delay_seconds}s")
        return self._pending

    def disarm(self) -> None:
        if self._pending is not None:
            logger.info(f"Grab for champion {self._pending.champion_id} disarmed")
        self._pending = None

    def is_due(self, now: Optional[float] = None) -> bool:
        if self._pending is None:
            return False
        if now is None:
            now = self._clock()
        return now >= self._pending.will_grab_at
