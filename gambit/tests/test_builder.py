"""
Tests for snapshotting the live game.
"""

from ..engine_core.builder import StateBuilder
from ..engine_core.state import DurationType, Team
from ..games.skirmish import Unit, barrier_effect
from ..games.skirmish.effects import shield_effect


class FakeBoard:
    """A board that reports one missing tile."""
    rows = 2
    columns = 2

    def tile_effects_at(self, row, column):
        if (row, column) == (1, 1):
            return None
        return []


class FakeRoster:
    all_units = []


class FakePlayer:
    current_hp = 7


class TestStateBuilder:
    """Tests for root snapshot construction."""

    def test_ids_follow_roster_order(self, skirmish):
        """Living units get ids 0..n-1 that map back to live units."""
        built = skirmish.state_builder().build()

        assert [u.id for u in built.state.units] == [0, 1]
        for unit_id, live in enumerate(skirmish.all_units):
            assert built.live_unit(unit_id) is live
        assert built.live_unit(5) is None

    def test_snapshot_copies_stats(self, skirmish):
        """Unit stats and player HP are copied."""
        state = skirmish.state_builder().build().state
        knight = state.unit_by_id(0)

        assert state.player_hp == 20
        assert (state.rows, state.columns) == (4, 8)
        assert (knight.team, knight.unit_type, knight.row, knight.column) == (Team.BOSS, "B", 3, 2)
        assert (knight.health, knight.damage, knight.worth, knight.moves_left) == (3, 2, 2, 1)

    def test_effects_snapshotted(self, skirmish):
        """Unit and tile effects become snapshot effects."""
        skirmish.boss_units[0].add_effect(shield_effect(duration=2))
        skirmish.board.tile(1, 1).effects.append(barrier_effect(duration=3))

        state = skirmish.state_builder().build().state
        (effect,) = state.unit_by_id(0).effects
        assert effect.duration_type is DurationType.TEMPORARY
        assert effect.remaining_duration == 2
        assert not effect.can_be_attacked
        assert state.is_tile_blocked(1, 1)
        assert state.tile_effects_at(1, 1)[0].remaining_duration == 3

    def test_unplaced_and_dead_units_skipped(self, skirmish):
        """Units off the board or without health get no id."""
        skirmish.units.append(Unit(Team.BOSS, "A", health=2, damage=1))
        skirmish.player_units[0].health = 0

        built = skirmish.state_builder().build()
        assert len(built.state.units) == 1
        assert built.live_unit(0) is skirmish.boss_units[0]

    def test_snapshot_is_detached(self, skirmish):
        """Changing the live game afterwards does not touch the snapshot."""
        state = skirmish.state_builder().build().state
        skirmish.boss_units[0].health = 1
        assert state.unit_by_id(0).health == 3

    def test_missing_collaborator(self, skirmish):
        """No board, roster or player means no snapshot."""
        assert StateBuilder(None, skirmish, skirmish.player).build() is None
        assert StateBuilder(skirmish.board, None, skirmish.player).build() is None
        assert StateBuilder(skirmish.board, skirmish, None).build() is None

    def test_missing_tile_has_no_effects(self):
        """A tile the board cannot report is treated as empty."""
        built = StateBuilder(FakeBoard(), FakeRoster(), FakePlayer()).build()
        assert built.state.tile_effects_at(1, 1) == ()
        assert built.state.player_hp == 7

    def test_invalid_dimensions(self):
        """A board without tiles cannot be snapshotted."""
        board = FakeBoard()
        board.rows = 0
        assert StateBuilder(board, FakeRoster(), FakePlayer()).build() is None
