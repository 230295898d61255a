"""Champion select session models.

Value objects for the subset of ``/lol-champ-select/v1/session`` the
decision engine reads. Everything is frozen and uses tuples, so two
sessions built from the same payload compare equal.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

EMPTY_BAN_ACTION_ID = -1


class ActionType(str, Enum):
    """Action types reported by the client."""

    PICK = "pick"
    BAN = "ban"
    TEN_BANS_REVEAL = "ten_bans_reveal"


def _as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, (float, str)):
        try:
            return int(value)
        except (ValueError, OverflowError):
            return default
    return default


def _as_bool(value: Any) -> bool:
    return value is True or (isinstance(value, (int, str)) and value in (1, "true", "True"))


def _as_list(value: Any) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def _as_ids(values: Any) -> tuple[int, ...]:
    return tuple(i for i in (_as_int(v) for v in _as_list(values)) if i != 0)


@dataclass(frozen=True)
class TeamMember:
    """A player seat in champion select."""

    puuid: str
    cell_id: int
    champion_id: int = 0  # 0 = not chosen
    champion_pick_intent: int = 0  # 0 = no intent declared

    @classmethod
    def from_lcu(cls, data: Any) -> Optional["TeamMember"]:
        if not isinstance(data, dict):
            return None
        return cls(
            puuid=str(data.get("puuid") or ""),
            cell_id=_as_int(data.get("cellId"), default=-1),
            champion_id=_as_int(data.get("championId")),
            champion_pick_intent=_as_int(data.get("championPickIntent")),
        )


@dataclass(frozen=True)
class Action:
    """A single pick or ban turn assigned to a seat."""

    id: int
    actor_cell_id: int
    champion_id: int = 0
    type: str = ActionType.PICK.value
    completed: bool = False
    is_in_progress: bool = False

    @property
    def is_pick(self) -> bool:
        return self.type == ActionType.PICK.value

    @property
    def is_ban(self) -> bool:
        return self.type == ActionType.BAN.value

    @classmethod
    def from_lcu(cls, data: Any) -> Optional["Action"]:
        if not isinstance(data, dict):
            return None
        return cls(
            id=_as_int(data.get("id")),
            actor_cell_id=_as_int(data.get("actorCellId"), default=-1),
            champion_id=_as_int(data.get("championId")),
            type=str(data.get("type") or ""),
            completed=_as_bool(data.get("completed")),
            is_in_progress=_as_bool(data.get("isInProgress")),
        )


@dataclass(frozen=True)
class Bans:
    """Champions already banned, per team."""

    my_team_bans: tuple[int, ...] = ()
    their_team_bans: tuple[int, ...] = ()

    @property
    def all(self) -> frozenset[int]:
        return frozenset(self.my_team_bans) | frozenset(self.their_team_bans)

    @classmethod
    def from_lcu(cls, data: Any) -> "Bans":
        if not isinstance(data, dict):
            return cls()
        return cls(
            my_team_bans=_as_ids(data.get("myTeamBans")),
            their_team_bans=_as_ids(data.get("theirTeamBans")),
        )


@dataclass(frozen=True)
class Session:
    """Champion select session as seen by the local player."""

    my_team: tuple[TeamMember, ...] = ()
    their_team: tuple[TeamMember, ...] = ()
    # Ordered rounds; each round holds the actions that resolve together
    actions: tuple[tuple[Action, ...], ...] = ()
    bans: Bans = field(default_factory=Bans)
    has_simultaneous_picks: bool = False
    allow_duplicate_picks: bool = False
    is_custom_game: bool = False
    local_player_cell_id: int = -1
    bench_enabled: bool = False
    bench_champions: tuple[int, ...] = ()
    game_id: int = 0
    timer_phase: str = ""

    @property
    def members(self) -> tuple[TeamMember, ...]:
        """Both teams, own team first."""
        return self.my_team + self.their_team

    def iter_actions(self):
        """Yield every action across all rounds in round order."""
        for round_ in self.actions:
            yield from round_

    @classmethod
    def from_lcu(cls, payload: Any) -> Optional["Session"]:
        """Build a session from the client's JSON, tolerating missing fields.

        Returns None if the payload is not an object at all.
        """
        if not isinstance(payload, dict):
            return None

        def _members(values: Any) -> tuple[TeamMember, ...]:
            parsed = (TeamMember.from_lcu(v) for v in _as_list(values))
            return tuple(m for m in parsed if m is not None)

        rounds = []
        for raw_round in _as_list(payload.get("actions")):
            parsed = (Action.from_lcu(a) for a in _as_list(raw_round))
            rounds.append(tuple(a for a in parsed if a is not None))

        bench = []
        for entry in _as_list(payload.get("benchChampions")):
            # Older clients send bare ids, newer ones objects
            champion_id = _as_int(entry.get("championId")) if isinstance(entry, dict) else _as_int(entry)
            if champion_id:
                bench.append(champion_id)

        timer = payload.get("timer")
        return cls(
            my_team=_members(payload.get("myTeam")),
            their_team=_members(payload.get("theirTeam")),
            actions=tuple(rounds),
            bans=Bans.from_lcu(payload.get("bans")),
            has_simultaneous_picks=_as_bool(payload.get("hasSimultaneousPicks")),
            allow_duplicate_picks=_as_bool(payload.get("allowDuplicatePicks")),
            is_custom_game=_as_bool(payload.get("isCustomGame")),
            local_player_cell_id=_as_int(payload.get("localPlayerCellId"), default=-1),
            bench_enabled=_as_bool(payload.get("benchEnabled")),
            bench_champions=tuple(bench),
            game_id=_as_int(payload.get("gameId")),
            timer_phase=str(timer.get("phase") or "") if isinstance(timer, dict) else "",
        )
