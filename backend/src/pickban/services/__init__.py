"""Business logic services."""

from pickban.services.auto_select_actuator import AutoSelectActuator
from pickban.services.auto_select_state import AutoSelectState
from pickban.services.decision_engine import (
    DecisionEngine,
    bench_grab_target,
    self_action_context,
    upcoming_ban,
    upcoming_pick,
)
from pickban.services.grab_scheduler import GrabScheduler

__all__ = [
    "AutoSelectActuator",
    "AutoSelectState",
    "DecisionEngine",
    "bench_grab_target",
    "self_action_context",
    "upcoming_ban",
    "upcoming_pick",
    "GrabScheduler",
]
