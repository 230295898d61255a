"""Auto select preferences and decision models."""

from dataclasses import asdict, dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pickban.models.champ_select import Action, Session, TeamMember

# Entry in ``banned_champions`` meaning "submit an empty ban"
EMPTY_BAN_CHAMPION_ID = -1


class AutoSelectSettings(BaseModel):
    """User-configured automation preferences.

    Frozen so a settings value can key the decision cache. Accepts the
    client's camelCase option names as well as snake_case.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    normal_mode_enabled: bool = False
    only_simul_mode: bool = False
    expected_champions: tuple[int, ...] = ()
    select_teammate_intended_champion: bool = False
    show_intent: bool = False
    completed: bool = False
    bench_mode_enabled: bool = False
    bench_expected_champions: tuple[int, ...] = ()
    grab_delay_seconds: float = Field(default=1.0, ge=0)
    ban_enabled: bool = False
    banned_champions: tuple[int, ...] = ()  # may contain EMPTY_BAN_CHAMPION_ID
    ban_teammate_intended_champion: bool = False


@dataclass(frozen=True)
class HighIdChampionPolicy:
    """Blanket pick eligibility for champion ids at or above a threshold.

    Off by default; see ``Settings.allow_high_id_champions``.
    """

    enabled: bool = False
    threshold: int = 3000

    def allows(self, champion_id: int) -> bool:
        return self.enabled and champion_id >= self.threshold


@dataclass(frozen=True)
class ActionRef:
    """The action a decision would be submitted against."""

    id: int
    is_in_progress: bool
    completed: bool

    @classmethod
    def of(cls, action: Action) -> "ActionRef":
        return cls(id=action.id, is_in_progress=action.is_in_progress, completed=action.completed)


@dataclass(frozen=True)
class UpcomingAction:
    """Next automated pick or ban."""

    champion_id: int
    is_acting_now: bool
    action: ActionRef

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PendingGrab:
    """A bench grab waiting for its delay to elapse."""

    champion_id: int
    will_grab_at: float  # epoch seconds

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SelfActionContext:
    """The local player's slice of the session."""

    pick_actions: tuple[Action, ...]
    ban_actions: tuple[Action, ...]
    session: Session
    self_member: TeamMember
    is_acting_now: bool
    current_pickables: frozenset[int]
    current_bannables: frozenset[int]

    def first_incomplete_pick(self) -> Optional[Action]:
        return next((a for a in self.pick_actions if not a.completed), None)

    def first_incomplete_ban(self) -> Optional[Action]:
        return next((a for a in self.ban_actions if not a.completed), None)
