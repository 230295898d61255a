"""Turns auto select decisions into client commands."""

import logging
import time
from typing import Callable, Optional

from pickban.lcu.client import LcuClient
from pickban.lcu.sync import TRANSPORT_ERRORS
from pickban.models.auto_select import UpcomingAction
from pickban.services.auto_select_state import AutoSelectState
from pickban.utils.errors import format_error

logger = logging.getLogger(__name__)


class AutoSelectActuator:
    """Submits picks, bans and due grabs.

    Call ``on_session_change`` after every session update and ``tick``
    periodically so due grabs fire. Each (action, champion, completed)
    combination is submitted at most once.
    """

    def __init__(
        self,
        state: AutoSelectState,
        client: LcuClient,
        clock: Callable[[], float] = time.time,
    ):
        self.state = state
        self.client = client
        self._clock = clock
        self._submitted: set[tuple[int, int, bool]] = set()

    def on_session_change(self) -> None:
        if self.state.context.session is None:
            self._submitted.clear()
            self.state.disarm_grab()
            return
        self.state.sync_grab_target()
        self.tick()

    def tick(self) -> None:
        ban = self.state.upcoming_ban
        if ban is not None and ban.is_acting_now and ban.action.is_in_progress:
            self._submit("ban", ban, completed=True)
        else:
            self._handle_pick(self.state.upcoming_pick)

        self._handle_grab()

    def _handle_pick(self, pick: Optional[UpcomingAction]) -> None:
        if pick is None:
            return
        settings = self.state.settings
        if pick.is_acting_now and pick.action.is_in_progress:
            self._submit("pick", pick, completed=settings.completed)
        elif settings.show_intent and not pick.action.is_in_progress:
            self._submit("intent", pick, completed=False)

    def _submit(self, label: str, decision: UpcomingAction, completed: bool) -> None:
        key = (decision.action.id, decision.champion_id, completed)
        if key in self._submitted:
            logger.debug(f"Skipping already submitted {label} {key}")
            return

        try:
            self.client.patch_action(decision.action.id, decision.champion_id, completed)
        except TRANSPORT_ERRORS as e:
            logger.warning(f"Auto {label} of champion {decision.champion_id} failed {format_error(e)}")
            return

        self._submitted.add(key)
        logger.info(
            f"Auto {label}: champion {decision.champion_id} on action "
            f"{decision.action.id} (completed={completed})"
        )

    def _handle_grab(self) -> None:
        pending = self.state.upcoming_grab
        if pending is None or not self.state.grab.is_due(self._clock()):
            return

        try:
            self.client.bench_swap(pending.champion_id)
        except TRANSPORT_ERRORS as e:
            logger.warning(f"Bench grab of champion {pending.champion_id} failed {format_error(e)}")
        else:
            logger.info(f"Grabbed champion {pending.champion_id} from the bench")
        finally:
            # A failed swap is not retried; the next bench change re-arms it
            self.state.disarm_grab()
