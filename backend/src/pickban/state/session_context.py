"""Latest known champion select state.

The ingestion side is the only writer. Readers take a ``SessionSnapshot``
and work on that value, so a reader never sees the session from one event
paired with the pickable set from another.
"""

import threading
from dataclasses import dataclass, field, replace
from typing import Optional

from pickban.models.champ_select import Session

_UPDATABLE_FIELDS = frozenset(
    {"session", "puuid", "is_acting_now", "current_pickables", "current_bannables"}
)


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of the context at one version."""

    session: Optional[Session] = None
    puuid: Optional[str] = None
    is_acting_now: bool = False
    current_pickables: frozenset[int] = field(default_factory=frozenset)
    current_bannables: frozenset[int] = field(default_factory=frozenset)
    version: int = 0


class SessionContext:
    """Holder for the current session, local identity and server permissions."""

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot = SessionSnapshot()

    def snapshot(self) -> SessionSnapshot:
        """Current state. Safe to hold onto; later updates never mutate it."""
        return self._snapshot

    @property
    def version(self) -> int:
        return self._snapshot.version

    @property
    def session(self) -> Optional[Session]:
        return self._snapshot.session

    @property
    def puuid(self) -> Optional[str]:
        return self._snapshot.puuid

    @property
    def current_pickables(self) -> frozenset[int]:
        return self._snapshot.current_pickables

    @property
    def current_bannables(self) -> frozenset[int]:
        return self._snapshot.current_bannables

    def update(self, **changes) -> SessionSnapshot:
        """Replace any subset of fields as a single step.

        Raises:
            TypeError: If a field name is not part of the snapshot
        """
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise TypeError(f"Unknown session context fields: {sorted(unknown)}")

        for key in ("current_pickables", "current_bannables"):
            if key in changes:
                changes[key] = frozenset(changes[key] or ())

        with self._lock:
            self._snapshot = replace(
                self._snapshot, version=self._snapshot.version + 1, **changes
            )
            return self._snapshot

    def clear_session(self) -> SessionSnapshot:
        """Drop the session when champion select ends. Identity is kept."""
        return self.update(
            session=None,
            is_acting_now=False,
            current_pickables=frozenset(),
            current_bannables=frozenset(),
        )
