"""Derives the local player's next automated pick and ban.

The module-level functions are pure: they take a ``SessionSnapshot`` and
``AutoSelectSettings`` and return a decision or None. ``DecisionEngine``
wraps them with a cache keyed on the snapshot version and settings value,
and notifies listeners only when a result changes by value.
"""

import logging
import threading
from typing import Callable, Optional

from pickban.models.auto_select import (
    EMPTY_BAN_CHAMPION_ID,
    ActionRef,
    AutoSelectSettings,
    HighIdChampionPolicy,
    SelfActionContext,
    UpcomingAction,
)
from pickban.models.champ_select import EMPTY_BAN_ACTION_ID, Session, TeamMember
from pickban.state.session_context import SessionContext, SessionSnapshot

logger = logging.getLogger(__name__)

Listener = Callable[[str, object], None]


def self_action_context(snapshot: SessionSnapshot) -> Optional[SelfActionContext]:
    """Collect the local player's pick and ban actions in round order.

    Returns None when there is no session, no known identity, or the local
    player is not seated on ``my_team``.
    """
    session = snapshot.session
    if session is None or not snapshot.puuid:
        return None

    me = next((m for m in session.my_team if m.puuid == snapshot.puuid), None)
    if me is None:
        return None

    rounds = [
        [a for a in round_ if a.actor_cell_id == me.cell_id]
        for round_ in session.actions
    ]
    mine = [a for round_ in rounds if round_ for a in round_]

    return SelfActionContext(
        pick_actions=tuple(a for a in mine if a.is_pick),
        ban_actions=tuple(a for a in mine if a.is_ban),
        session=session,
        self_member=me,
        is_acting_now=snapshot.is_acting_now,
        current_pickables=snapshot.current_pickables,
        current_bannables=snapshot.current_bannables,
    )


def _teammate_intents(session: Session, me: TeamMember) -> set[int]:
    """Declared pick intents of teammates, not counting our own."""
    return {
        m.champion_pick_intent
        for m in session.my_team
        if m.champion_pick_intent and m.puuid != me.puuid
    }


def unpickable_champions(
    ctx: SelfActionContext, settings: AutoSelectSettings
) -> set[int]:
    """Champions the local player may not pick right now."""
    session = ctx.session
    me = ctx.self_member
    unpickables: set[int] = set()

    # Anything locked in on the board, ours excepted
    for member in session.members:
        if member.champion_id and member.puuid != me.puuid:
            unpickables.add(member.champion_id)

    for member in session.my_team:
        unpickables.add(member.champion_id)

    if not session.allow_duplicate_picks:
        for action in session.iter_actions():
            if action.completed:
                unpickables.add(action.champion_id)

    for action in session.iter_actions():
        if action.is_ban and action.completed:
            unpickables.add(action.champion_id)

    if not settings.select_teammate_intended_champion:
        unpickables |= _teammate_intents(session, me)

    unpickables |= session.bans.all
    return unpickables


def unbannable_champions(
    ctx: SelfActionContext, settings: AutoSelectSettings
) -> set[int]:
    """Champions there is no point banning, or that we must not ban."""
    session = ctx.session
    unbannables: set[int] = set()

    # An empty ban does not take anything out of the pool
    for action in session.iter_actions():
        if action.is_ban and action.completed and action.id != EMPTY_BAN_ACTION_ID:
            unbannables.add(action.champion_id)

    unbannables |= session.bans.all

    if not settings.ban_teammate_intended_champion:
        unbannables |= _teammate_intents(session, ctx.self_member)

    return unbannables


def upcoming_pick(
    ctx: Optional[SelfActionContext],
    settings: AutoSelectSettings,
    policy: HighIdChampionPolicy = HighIdChampionPolicy(),
) -> Optional[UpcomingAction]:
    """First champion from ``expected_champions`` the local player can pick.

    Preference order is the user's configured order, not champion id.
    """
    if not settings.normal_mode_enabled or not settings.expected_champions:
        return None
    if ctx is None or not ctx.pick_actions:
        return None

    first = ctx.first_incomplete_pick()
    if first is None:
        return None
    if ctx.self_member.champion_id:
        return None
    if settings.only_simul_mode and not ctx.session.has_simultaneous_picks:
        return None

    unpickables = unpickable_champions(ctx, settings)
    candidates = [
        c
        for c in settings.expected_champions
        if c not in unpickables and (c in ctx.current_pickables or policy.allows(c))
    ]
    if not candidates:
        return None

    return UpcomingAction(
        champion_id=candidates[0],
        is_acting_now=ctx.is_acting_now,
        action=ActionRef.of(first),
    )


def upcoming_ban(
    ctx: Optional[SelfActionContext],
    settings: AutoSelectSettings,
) -> Optional[UpcomingAction]:
    """First entry of ``banned_champions`` the local player can ban.

    The empty ban entry is skipped in custom games, which reject it.
    """
    if not settings.ban_enabled:
        return None
    if ctx is None or not ctx.ban_actions:
        return None

    first = ctx.first_incomplete_ban()
    if first is None:
        return None

    unbannables = unbannable_champions(ctx, settings)

    def eligible(champion_id: int) -> bool:
        if champion_id == EMPTY_BAN_CHAMPION_ID:
            return not ctx.session.is_custom_game
        return champion_id not in unbannables and champion_id in ctx.current_bannables

    candidates = [c for c in settings.banned_champions if eligible(c)]
    if not candidates:
        return None

    return UpcomingAction(
        champion_id=candidates[0],
        is_acting_now=ctx.is_acting_now,
        action=ActionRef.of(first),
    )


def bench_grab_target(
    snapshot: SessionSnapshot, settings: AutoSelectSettings
) -> Optional[int]:
    """Best bench champion worth swapping for, or None.

    Only champions ranked above the one we currently hold in
    ``bench_expected_champions`` count; an unlisted current champion ranks last.
    """
    session = snapshot.session
    if not settings.bench_mode_enabled or session is None or not session.bench_enabled:
        return None
    if not snapshot.puuid:
        return None

    me = next((m for m in session.my_team if m.puuid == snapshot.puuid), None)
    if me is None:
        return None

    preferences = settings.bench_expected_champions
    if me.champion_id in preferences:
        preferences = preferences[: preferences.index(me.champion_id)]

    on_bench = set(session.bench_champions)
    return next((c for c in preferences if c in on_bench), None)


class DecisionEngine:
    """Memoized, observable view over the pure derivations."""

    def __init__(
        self,
        context: SessionContext,
        settings_provider: Callable[[], AutoSelectSettings],
        policy: Optional[HighIdChampionPolicy] = None,
    ):
        self.context = context
        self._settings_provider = settings_provider
        self.policy = policy or HighIdChampionPolicy()
        self._lock = threading.Lock()
        self._cache_key: Optional[tuple] = None
        self._values: dict[str, object] = {
            "self_action_context": None,
            "upcoming_pick": None,
            "upcoming_ban": None,
        }
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with ``(name, value)`` on change.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _evaluate(self) -> dict[str, object]:
        """Derive all values from one snapshot and return them together.

        The key check, derivation and store happen under one lock, so a reader
        never gets the values of an older version paired with a newer key.
        Listeners run after the lock is released.
        """
        with self._lock:
            snapshot = self.context.snapshot()
            settings = self._settings_provider()
            key = (snapshot.version, settings)
            if key == self._cache_key:
                return dict(self._values)

            ctx = self_action_context(snapshot)
            fresh = {
                "self_action_context": ctx,
                "upcoming_pick": upcoming_pick(ctx, settings, self.policy),
                "upcoming_ban": upcoming_ban(ctx, settings),
            }

            changed = []
            for name, value in fresh.items():
                # Equal results keep the previous object so identity checks downstream stay stable
                if value != self._values[name]:
                    self._values[name] = value
                    changed.append(name)
            self._cache_key = key
            values = dict(self._values)

        for name in changed:
            logger.debug(f"{name} changed: {values[name]}")
            for listener in list(self._listeners):
                listener(name, values[name])
        return values

    def decisions(self) -> dict[str, object]:
        """Context, pick and ban as of a single session version."""
        return self._evaluate()

    def refresh(self) -> None:
        """Re-evaluate now and notify listeners of changes."""
        self._evaluate()

    def self_action_context(self) -> Optional[SelfActionContext]:
        return self._evaluate()["self_action_context"]

    def upcoming_pick(self) -> Optional[UpcomingAction]:
        return self._evaluate()["upcoming_pick"]

    def upcoming_ban(self) -> Optional[UpcomingAction]:
        return self._evaluate()["upcoming_ban"]
