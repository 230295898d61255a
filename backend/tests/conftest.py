"""Shared builders for champion select sessions."""

import pytest

from pickban.models.champ_select import Action, Bans, Session, TeamMember
from pickban.state.session_context import SessionSnapshot

ME = "puuid-me"


def member(puuid, cell_id, champion_id=0, intent=0):
    return TeamMember(
        puuid=puuid, cell_id=cell_id, champion_id=champion_id, champion_pick_intent=intent
    )


def pick(action_id, cell_id, champion_id=0, completed=False, in_progress=False):
    return Action(
        id=action_id,
        actor_cell_id=cell_id,
        champion_id=champion_id,
        type="pick",
        completed=completed,
        is_in_progress=in_progress,
    )


def ban(action_id, cell_id, champion_id=0, completed=False, in_progress=False):
    return Action(
        id=action_id,
        actor_cell_id=cell_id,
        champion_id=champion_id,
        type="ban",
        completed=completed,
        is_in_progress=in_progress,
    )


def snapshot(session, puuid=ME, pickables=(), bannables=(), acting=False, version=1):
    return SessionSnapshot(
        session=session,
        puuid=puuid,
        is_acting_now=acting,
        current_pickables=frozenset(pickables),
        current_bannables=frozenset(bannables),
        version=version,
    )


@pytest.fixture
def draft_session():
    """Two seats per team: me at cell 0, ally at 1, enemies at 5 and 6."""
    return Session(
        my_team=(member(ME, 0), member("ally", 1)),
        their_team=(member("enemy-a", 5), member("enemy-b", 6)),
        actions=(
            (ban(1, 0), ban(2, 1), ban(3, 5), ban(4, 6)),
            (pick(10, 0, in_progress=True),),
            (pick(11, 5), pick(12, 6)),
            (pick(13, 1),),
        ),
        bans=Bans(),
        local_player_cell_id=0,
    )


@pytest.fixture
def all_champions():
    return frozenset(range(1, 1000))


@pytest.fixture
def anyio_backend():
    return "asyncio"
