"""Tests for the pick/ban decision engine."""

from dataclasses import replace

import pytest

from conftest import ME, ban, member, pick, snapshot
from pickban.models.auto_select import AutoSelectSettings, HighIdChampionPolicy
from pickban.models.champ_select import Bans, Session
from pickban.services.decision_engine import (
    DecisionEngine,
    bench_grab_target,
    self_action_context,
    unbannable_champions,
    unpickable_champions,
    upcoming_ban,
    upcoming_pick,
)
from pickban.state.session_context import SessionContext


@pytest.fixture
def pick_settings():
    return AutoSelectSettings(normal_mode_enabled=True, expected_champions=(10, 20, 30))


@pytest.fixture
def ban_settings():
    return AutoSelectSettings(ban_enabled=True, banned_champions=(40, 50, 60))


class TestSelfActionContext:
    def test_collects_own_actions_in_round_order(self, draft_session):
        ctx = self_action_context(snapshot(draft_session))
        assert ctx is not None
        assert [a.id for a in ctx.pick_actions] == [10]
        assert [a.id for a in ctx.ban_actions] == [1]
        assert ctx.self_member.cell_id == 0

    def test_none_without_identity(self, draft_session):
        assert self_action_context(snapshot(draft_session, puuid=None)) is None

    def test_none_without_session(self):
        assert self_action_context(snapshot(None)) is None

    def test_none_when_not_on_my_team(self, draft_session):
        assert self_action_context(snapshot(draft_session, puuid="enemy-a")) is None

    def test_passes_through_permissions_and_acting_flag(self, draft_session):
        ctx = self_action_context(snapshot(draft_session, pickables={1}, bannables={2}, acting=True))
        assert ctx.current_pickables == {1}
        assert ctx.current_bannables == {2}
        assert ctx.is_acting_now is True

    def test_multiple_picks_keep_order(self):
        session = Session(
            my_team=(member(ME, 3),),
            actions=((pick(7, 3, completed=True),), (pick(2, 4),), (pick(9, 3),)),
        )
        ctx = self_action_context(snapshot(session))
        assert [a.id for a in ctx.pick_actions] == [7, 9]
        assert ctx.first_incomplete_pick().id == 9


class TestUpcomingPick:
    def test_preference_order_wins(self, draft_session, pick_settings, all_champions):
        ctx = self_action_context(snapshot(draft_session, pickables=all_champions))
        result = upcoming_pick(ctx, pick_settings)
        assert result.champion_id == 10
        assert result.action.id == 10
        assert result.action.is_in_progress is True
        assert result.action.completed is False

    def test_preference_order_not_numeric(self, draft_session, all_champions):
        settings = AutoSelectSettings(normal_mode_enabled=True, expected_champions=(30, 10, 20))
        ctx = self_action_context(snapshot(draft_session, pickables=all_champions))
        assert upcoming_pick(ctx, settings).champion_id == 30

    def test_opponent_pick_excluded(self):
        session = Session(
            my_team=(member("A", 0),),
            their_team=(member("B", 1, champion_id=55),),
            actions=((pick(1, 0),),),
        )
        settings = AutoSelectSettings(normal_mode_enabled=True, expected_champions=(55, 77))
        ctx = self_action_context(snapshot(session, puuid="A", pickables={77}))
        assert upcoming_pick(ctx, settings).champion_id == 77

    def test_none_when_already_locked_in(self, draft_session, pick_settings, all_champions):
        my_team = (member(ME, 0, champion_id=99), member("ally", 1))
        session = replace(draft_session, my_team=my_team)
        ctx = self_action_context(snapshot(session, pickables=all_champions))
        assert upcoming_pick(ctx, pick_settings) is None

    def test_none_when_disabled(self, draft_session, all_champions):
        settings = AutoSelectSettings(normal_mode_enabled=False, expected_champions=(10,))
        ctx = self_action_context(snapshot(draft_session, pickables=all_champions))
        assert upcoming_pick(ctx, settings) is None

    def test_none_when_no_expected_champions(self, draft_session, all_champions):
        settings = AutoSelectSettings(normal_mode_enabled=True)
        ctx = self_action_context(snapshot(draft_session, pickables=all_champions))
        assert upcoming_pick(ctx, settings) is None

    def test_none_without_context(self, pick_settings):
        assert upcoming_pick(None, pick_settings) is None

    def test_none_when_all_picks_completed(self, pick_settings, all_champions):
        session = Session(my_team=(member(ME, 0),), actions=((pick(1, 0, completed=True),),))
        ctx = self_action_context(snapshot(session, pickables=all_champions))
        assert upcoming_pick(ctx, pick_settings) is None

    def test_only_simul_mode(self, draft_session, all_champions):
        settings = AutoSelectSettings(
            normal_mode_enabled=True, only_simul_mode=True, expected_champions=(10,)
        )
        ctx = self_action_context(snapshot(draft_session, pickables=all_champions))
        assert upcoming_pick(ctx, settings) is None

        simul = replace(draft_session, has_simultaneous_picks=True)
        ctx = self_action_context(snapshot(simul, pickables=all_champions))
        assert upcoming_pick(ctx, settings).champion_id == 10

    def test_completed_pick_elsewhere_blocks_without_duplicates(self, pick_settings, all_champions):
        # Champion 10 was picked by a seat no longer on either roster
        session = Session(
            my_team=(member(ME, 0),),
            actions=((pick(5, 8, champion_id=10, completed=True),), (pick(6, 0),)),
        )
        ctx = self_action_context(snapshot(session, pickables=all_champions))
        assert upcoming_pick(ctx, pick_settings).champion_id == 20

        dupes = replace(session, allow_duplicate_picks=True)
        ctx = self_action_context(snapshot(dupes, pickables=all_champions))
        assert upcoming_pick(ctx, pick_settings).champion_id == 10

    def test_completed_ban_blocks_even_with_duplicates(self, pick_settings, all_champions):
        session = Session(
            my_team=(member(ME, 0),),
            actions=((ban(3, 5, champion_id=10, completed=True),), (pick(6, 0),)),
            allow_duplicate_picks=True,
        )
        ctx = self_action_context(snapshot(session, pickables=all_champions))
        assert upcoming_pick(ctx, pick_settings).champion_id == 20

    def test_teammate_intent_blocks_unless_allowed(self, draft_session, all_champions):
        my_team = (member(ME, 0, intent=20), member("ally", 1, intent=10))
        session = replace(draft_session, my_team=my_team)
        ctx = self_action_context(snapshot(session, pickables=all_champions))

        settings = AutoSelectSettings(normal_mode_enabled=True, expected_champions=(10, 20))
        assert upcoming_pick(ctx, settings).champion_id == 20

        allow = settings.model_copy(update={"select_teammate_intended_champion": True})
        assert upcoming_pick(ctx, allow).champion_id == 10

    def test_team_bans_block(self, draft_session, pick_settings, all_champions):
        session = replace(draft_session, bans=Bans(my_team_bans=(10,), their_team_bans=(20,)))
        ctx = self_action_context(snapshot(session, pickables=all_champions))
        assert upcoming_pick(ctx, pick_settings).champion_id == 30

    def test_requires_server_pickable(self, draft_session, pick_settings):
        ctx = self_action_context(snapshot(draft_session, pickables={30}))
        assert upcoming_pick(ctx, pick_settings).champion_id == 30

        ctx = self_action_context(snapshot(draft_session, pickables=set()))
        assert upcoming_pick(ctx, pick_settings) is None

    def test_high_id_policy(self, draft_session):
        settings = AutoSelectSettings(normal_mode_enabled=True, expected_champions=(3001, 10))
        ctx = self_action_context(snapshot(draft_session, pickables={10}))

        assert upcoming_pick(ctx, settings).champion_id == 10
        policy = HighIdChampionPolicy(enabled=True, threshold=3000)
        assert upcoming_pick(ctx, settings, policy).champion_id == 3001

    def test_unpickables_include_visible_picks(self, draft_session, pick_settings):
        my_team = (member(ME, 0), member("ally", 1, champion_id=11))
        their_team = (member("enemy-a", 5, champion_id=12), member("enemy-b", 6))
        session = replace(draft_session, my_team=my_team, their_team=their_team)
        ctx = self_action_context(snapshot(session))
        assert {11, 12} <= unpickable_champions(ctx, pick_settings)


class TestUpcomingBan:
    def test_first_eligible_in_order(self, draft_session, ban_settings, all_champions):
        ctx = self_action_context(snapshot(draft_session, bannables=all_champions, acting=True))
        result = upcoming_ban(ctx, ban_settings)
        assert result.champion_id == 40
        assert result.action.id == 1
        assert result.is_acting_now is True

    def test_none_when_disabled(self, draft_session, all_champions):
        settings = AutoSelectSettings(banned_champions=(40,))
        ctx = self_action_context(snapshot(draft_session, bannables=all_champions))
        assert upcoming_ban(ctx, settings) is None

    def test_none_without_ban_actions(self, ban_settings, all_champions):
        session = Session(my_team=(member(ME, 0),), actions=((pick(1, 0),),))
        ctx = self_action_context(snapshot(session, bannables=all_champions))
        assert upcoming_ban(ctx, ban_settings) is None

    def test_none_when_ban_completed(self, ban_settings, all_champions):
        session = Session(
            my_team=(member(ME, 0),), actions=((ban(1, 0, champion_id=40, completed=True),),)
        )
        ctx = self_action_context(snapshot(session, bannables=all_champions))
        assert upcoming_ban(ctx, ban_settings) is None

    def test_skips_already_banned(self, ban_settings, all_champions):
        session = Session(
            my_team=(member(ME, 0),),
            actions=((ban(7, 5, champion_id=40, completed=True), ban(8, 0)),),
            bans=Bans(their_team_bans=(50,)),
        )
        ctx = self_action_context(snapshot(session, bannables=all_champions))
        assert upcoming_ban(ctx, ban_settings).champion_id == 60

    def test_empty_ban_does_not_block(self, all_champions):
        session = Session(
            my_team=(member(ME, 0),),
            actions=((ban(-1, 5, champion_id=40, completed=True), ban(8, 0)),),
        )
        settings = AutoSelectSettings(ban_enabled=True, banned_champions=(40,))
        ctx = self_action_context(snapshot(session, bannables=all_champions))
        assert 40 not in unbannable_champions(ctx, settings)
        assert upcoming_ban(ctx, settings).champion_id == 40

    def test_empty_ban_sentinel(self, draft_session):
        settings = AutoSelectSettings(ban_enabled=True, banned_champions=(-1,))
        ctx = self_action_context(snapshot(draft_session))
        assert upcoming_ban(ctx, settings).champion_id == -1

    def test_empty_ban_rejected_in_custom_game(self, draft_session):
        settings = AutoSelectSettings(ban_enabled=True, banned_champions=(-1,))
        custom = replace(draft_session, is_custom_game=True)
        ctx = self_action_context(snapshot(custom))
        assert upcoming_ban(ctx, settings) is None

    def test_custom_game_falls_through_to_next_entry(self, draft_session):
        settings = AutoSelectSettings(ban_enabled=True, banned_champions=(-1, 50))
        custom = replace(draft_session, is_custom_game=True)
        ctx = self_action_context(snapshot(custom, bannables={50}))
        assert upcoming_ban(ctx, settings).champion_id == 50

    def test_teammate_intent_protected_unless_allowed(self, draft_session, ban_settings, all_champions):
        my_team = (member(ME, 0, intent=50), member("ally", 1, intent=40))
        session = replace(draft_session, my_team=my_team)
        ctx = self_action_context(snapshot(session, bannables=all_champions))

        # Our own intent does not protect a champion
        assert upcoming_ban(ctx, ban_settings).champion_id == 50

        allow = ban_settings.model_copy(update={"ban_teammate_intended_champion": True})
        assert upcoming_ban(ctx, allow).champion_id == 40

    def test_requires_server_bannable(self, draft_session, ban_settings):
        ctx = self_action_context(snapshot(draft_session, bannables={60}))
        assert upcoming_ban(ctx, ban_settings).champion_id == 60


class TestBenchGrabTarget:
    @pytest.fixture
    def bench_session(self):
        return Session(
            my_team=(member(ME, 0, champion_id=30),),
            bench_enabled=True,
            bench_champions=(20, 10, 99),
        )

    def test_prefers_configured_order(self, bench_session):
        settings = AutoSelectSettings(bench_mode_enabled=True, bench_expected_champions=(10, 20))
        assert bench_grab_target(snapshot(bench_session), settings) == 10

    def test_only_upgrades(self, bench_session):
        my_team = (member(ME, 0, champion_id=10),)
        session = replace(bench_session, my_team=my_team)
        settings = AutoSelectSettings(bench_mode_enabled=True, bench_expected_champions=(10, 20))
        assert bench_grab_target(snapshot(session), settings) is None

    def test_disabled(self, bench_session):
        settings = AutoSelectSettings(bench_expected_champions=(10,))
        assert bench_grab_target(snapshot(bench_session), settings) is None

    def test_bench_not_enabled(self, bench_session):
        settings = AutoSelectSettings(bench_mode_enabled=True, bench_expected_champions=(10,))
        session = replace(bench_session, bench_enabled=False)
        assert bench_grab_target(snapshot(session), settings) is None


class TestDecisionEngine:
    @pytest.fixture
    def context(self, draft_session, all_champions):
        context = SessionContext()
        context.update(
            session=draft_session,
            puuid=ME,
            current_pickables=all_champions,
            current_bannables=all_champions,
        )
        return context

    def test_reads_latest_snapshot(self, context, pick_settings, draft_session):
        engine = DecisionEngine(context, lambda: pick_settings)
        assert engine.upcoming_pick().champion_id == 10

        my_team = (member(ME, 0, champion_id=10), member("ally", 1))
        context.update(session=replace(draft_session, my_team=my_team))
        assert engine.upcoming_pick() is None

    def test_equal_result_is_not_reported_as_change(self, context, pick_settings, draft_session):
        engine = DecisionEngine(context, lambda: pick_settings)
        events = []
        engine.subscribe(lambda name, value: events.append(name))

        first = engine.upcoming_pick()
        assert events == ["self_action_context", "upcoming_pick"]

        # Unrelated change: enemy hovers something, our decision stays the same
        their_team = (member("enemy-a", 5, intent=77), member("enemy-b", 6))
        context.update(session=replace(draft_session, their_team=their_team))
        events.clear()
        assert engine.upcoming_pick() is first
        assert "upcoming_pick" not in events

    def test_settings_change_invalidates(self, context, pick_settings):
        current = {"settings": pick_settings}
        engine = DecisionEngine(context, lambda: current["settings"])
        assert engine.upcoming_pick().champion_id == 10

        current["settings"] = pick_settings.model_copy(update={"expected_champions": (20,)})
        assert engine.upcoming_pick().champion_id == 20

    def test_unsubscribe(self, context, pick_settings):
        engine = DecisionEngine(context, lambda: pick_settings)
        events = []
        unsubscribe = engine.subscribe(lambda name, value: events.append(name))
        unsubscribe()
        engine.refresh()
        assert events == []
