"""
Pytest fixtures for Gambit tests.
"""

import pytest

from ..bots.evaluator import BossEvaluator
from ..bots.search import MinimaxSearch
from ..engine_core.state import GameState, Team, TileEffectSnapshot, UnitSnapshot
from ..games.skirmish import Board, Player, Skirmish, Unit


@pytest.fixture
def make_unit():
    """Factory for unit snapshots with sensible defaults."""
    def _make(unit_id, team, row, column, unit_type="A", health=3, damage=1, **kwargs):
        return UnitSnapshot(
            id=unit_id,
            team=team,
            unit_type=unit_type,
            row=row,
            column=column,
            health=health,
            damage=damage,
            **kwargs,
        )
    return _make


@pytest.fixture
def empty_state() -> GameState:
    """An empty 4x8 board with the player at 20 HP."""
    return GameState(rows=4, columns=8, player_hp=20)


@pytest.fixture
def barrier() -> TileEffectSnapshot:
    """A tile-blocking effect lasting two boss phases."""
    return TileEffectSnapshot(remaining_duration=2, occupies_tile=True)


@pytest.fixture
def small_battle(make_unit) -> GameState:
    """A small 4x4 position with two units per side."""
    return GameState(
        rows=4,
        columns=4,
        player_hp=10,
        units=(
            make_unit(0, Team.BOSS, 3, 1, unit_type="B", health=3, damage=2, moves_left=1),
            make_unit(1, Team.BOSS, 2, 3, unit_type="A", health=2, damage=1, lifetime=3, moves_left=1),
            make_unit(2, Team.PLAYER, 0, 2, unit_type="D", health=3, damage=2),
            make_unit(3, Team.PLAYER, 1, 0, unit_type="A", health=2, damage=1),
        ),
    )


@pytest.fixture
def search() -> MinimaxSearch:
    """A search with default weights."""
    return MinimaxSearch(BossEvaluator())


@pytest.fixture
def skirmish() -> Skirmish:
    """A 4x8 live match with one boss knight and one player pawn."""
    game = Skirmish(Board(4, 8), Player(20))
    game.place_unit(Unit(Team.BOSS, "B", health=3, damage=2, worth=2, remaining_moves=1), 3, 2)
    game.place_unit(Unit(Team.PLAYER, "A", health=2, damage=1, worth=1), 0, 4)
    return game
