"""Auto select state: user settings, derived decisions and the pending grab."""

import threading
import time
from typing import Callable, Optional

from pickban.models.auto_select import (
    AutoSelectSettings,
    HighIdChampionPolicy,
    PendingGrab,
    UpcomingAction,
)
from pickban.services.decision_engine import DecisionEngine, bench_grab_target
from pickban.services.grab_scheduler import GrabScheduler
from pickban.state.session_context import SessionContext


class AutoSelectState:
    """Single entry point the actuator and API read decisions from.

    Constructed once per process and passed to whoever needs it.
    """

    def __init__(
        self,
        context: SessionContext,
        settings: Optional[AutoSelectSettings] = None,
        policy: Optional[HighIdChampionPolicy] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.context = context
        self._settings = settings or AutoSelectSettings()
        self._settings_lock = threading.Lock()
        self.engine = DecisionEngine(context, lambda: self._settings, policy)
        self.grab = GrabScheduler(clock=clock)

    @property
    def settings(self) -> AutoSelectSettings:
        return self._settings

    def replace_settings(self, settings: AutoSelectSettings) -> AutoSelectSettings:
        with self._settings_lock:
            self._settings = settings
        return settings

    def update_settings(self, changes: dict) -> AutoSelectSettings:
        """Apply a partial change, validated as a whole.

        Keys may use either the snake_case or the camelCase option names.

        Raises:
            pydantic.ValidationError: If the resulting settings are invalid
        """
        aliases = {
            field.alias: name
            for name, field in AutoSelectSettings.model_fields.items()
            if field.alias
        }
        changes = {aliases.get(key, key): value for key, value in changes.items()}
        with self._settings_lock:
            merged = {**self._settings.model_dump(), **changes}
            self._settings = AutoSelectSettings.model_validate(merged)
            return self._settings

    @property
    def upcoming_pick(self) -> Optional[UpcomingAction]:
        return self.engine.upcoming_pick()

    @property
    def upcoming_ban(self) -> Optional[UpcomingAction]:
        return self.engine.upcoming_ban()

    @property
    def upcoming_grab(self) -> Optional[PendingGrab]:
        return self.grab.pending

    def arm_grab(self, champion_id: int, delay_seconds: Optional[float] = None) -> PendingGrab:
        """Arm a grab, defaulting to the configured delay."""
        if delay_seconds is None:
            delay_seconds = self._settings.grab_delay_seconds
        return self.grab.arm(champion_id, delay_seconds)

    def disarm_grab(self) -> None:
        self.grab.disarm()

    def sync_grab_target(self) -> Optional[PendingGrab]:
        """Arm, re-arm or disarm the grab to match the current bench.

        An unchanged target keeps its original deadline.
        """
        target = bench_grab_target(self.context.snapshot(), self._settings)
        pending = self.grab.pending
        if target is None:
            if pending is not None:
                self.grab.disarm()
            return None
        if pending is not None and pending.champion_id == target:
            return pending
        return self.arm_grab(target)

    def snapshot_dict(self) -> dict:
        """JSON-ready view of the current decisions."""
        # Pick and ban come from one evaluation so they share a session version
        decisions = self.engine.decisions()
        pick = decisions["upcoming_pick"]
        ban = decisions["upcoming_ban"]
        grab = self.upcoming_grab
        return {
            "pick": pick.to_dict() if pick else None,
            "ban": ban.to_dict() if ban else None,
            "grab": grab.to_dict() if grab else None,
        }
