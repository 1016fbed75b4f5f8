"""
Tests for movement rules and the legal move resolver.

Tests:
- Forward direction flips per side
- Slides stop at the first occupied tile
- Jumps only look at the landing tile
- Blocked tiles and shielded units
"""

from ..engine_core.movement import (
    BISHOP,
    KNIGHT,
    PAWN,
    QUEEN,
    ROOK,
    MovementDefinition,
    MovementRule,
    standard_definition,
)
from ..engine_core.resolver import Cell, legal_moves
from ..engine_core.state import GameState, Team, UnitEffectSnapshot
from ..games.skirmish import Unit


def _state(*units, rows=4, columns=8):
    return GameState(rows=rows, columns=columns, player_hp=20, units=units)


def _moves(state, unit, definition):
    return legal_moves(state, unit, definition, state.rows, state.columns)


class TestMovementRules:
    """Tests for rule data."""

    def test_max_steps_clamped(self):
        """Non-positive max steps become one step."""
        assert MovementRule(0, 1, max_steps=0).max_steps == 1
        assert MovementRule(0, 1, max_steps=-3).max_steps == 1

    def test_definition_skips_empty_rules(self):
        """None entries are dropped from a definition."""
        definition = MovementDefinition("odd", (MovementRule(0, 1), None))
        assert len(definition.rules) == 1

    def test_standard_archetypes(self):
        """Unit types A-E map to the chess archetypes."""
        assert standard_definition("A") is PAWN
        assert standard_definition("B") is KNIGHT
        assert standard_definition("C") is BISHOP
        assert standard_definition("D") is ROOK
        assert standard_definition("E") is QUEEN

    def test_unknown_type_moves_like_pawn(self):
        """Unknown unit types fall back to pawn movement."""
        assert standard_definition("Z") is PAWN


class TestPawnMovement:
    """Tests for forward steps and diagonal captures."""

    def test_player_pawn_moves_up(self, make_unit):
        """Player pawns advance toward higher rows."""
        pawn = make_unit(0, Team.PLAYER, 0, 3)
        assert _moves(_state(pawn), pawn, PAWN) == [Cell(1, 3)]

    def test_boss_pawn_moves_down(self, make_unit):
        """Boss pawns advance toward row 0."""
        pawn = make_unit(0, Team.BOSS, 3, 3)
        assert _moves(_state(pawn), pawn, PAWN) == [Cell(2, 3)]

    def test_pawn_captures_diagonally_only(self, make_unit):
        """A blocked pawn can still capture on its forward diagonals."""
        pawn = make_unit(0, Team.PLAYER, 1, 3)
        state = _state(
            pawn,
            make_unit(1, Team.BOSS, 2, 3),
            make_unit(2, Team.BOSS, 2, 4),
            make_unit(3, Team.BOSS, 2, 2),
        )
        assert _moves(state, pawn, PAWN) == [Cell(2, 4), Cell(2, 2)]

    def test_pawn_cannot_move_diagonally_to_empty(self, make_unit):
        """Diagonal rules need an enemy to land on."""
        pawn = make_unit(0, Team.PLAYER, 1, 3)
        assert Cell(2, 4) not in _moves(_state(pawn), pawn, PAWN)

    def test_pawn_at_last_row_has_no_moves(self, make_unit):
        """Nothing lies beyond the edge of the board."""
        pawn = make_unit(0, Team.PLAYER, 3, 3)
        assert _moves(_state(pawn), pawn, PAWN) == []


class TestSlideMovement:
    """Tests for sliding rules."""

    def test_rook_stops_at_first_occupied_tile(self, make_unit):
        """Slides include an enemy stop and exclude a friendly one."""
        rook = make_unit(0, Team.PLAYER, 0, 0, unit_type="D")
        state = _state(
            rook,
            make_unit(1, Team.PLAYER, 0, 3),
            make_unit(2, Team.BOSS, 2, 0),
        )
        assert set(_moves(state, rook, ROOK)) == {Cell(1, 0), Cell(2, 0), Cell(0, 1), Cell(0, 2)}

    def test_unattackable_enemy_stops_slide(self, make_unit):
        """A shielded enemy blocks the slide and cannot be captured."""
        rook = make_unit(0, Team.PLAYER, 0, 0, unit_type="D")
        shielded = make_unit(
            1, Team.BOSS, 2, 0,
            effects=(UnitEffectSnapshot(can_be_attacked=False),),
        )
        moves = _moves(_state(rook, shielded), rook, ROOK)
        assert Cell(1, 0) in moves
        assert Cell(2, 0) not in moves
        assert Cell(3, 0) not in moves

    def test_blocked_tile_stops_slide(self, make_unit, barrier):
        """A barrier ends the slide before it."""
        rook = make_unit(0, Team.PLAYER, 0, 0, unit_type="D")
        state = _state(rook).with_tile_effects(2, 0, [barrier])
        moves = _moves(state, rook, ROOK)
        assert Cell(1, 0) in moves
        assert Cell(2, 0) not in moves
        assert Cell(3, 0) not in moves

    def test_destinations_stay_in_bounds(self, make_unit):
        """Every destination lies on the board."""
        queen = make_unit(0, Team.BOSS, 2, 4, unit_type="E")
        state = _state(queen, make_unit(1, Team.PLAYER, 0, 2))
        moves = _moves(state, queen, QUEEN)
        assert moves
        assert all(state.in_bounds(cell.row, cell.column) for cell in moves)


class TestJumpMovement:
    """Tests for knight jumps."""

    def test_knight_ignores_intermediate_tiles(self, make_unit):
        """Surrounding units do not stop a jump."""
        knight = make_unit(0, Team.PLAYER, 0, 1, unit_type="B")
        state = _state(
            knight,
            make_unit(1, Team.PLAYER, 1, 1),
            make_unit(2, Team.PLAYER, 0, 2),
            make_unit(3, Team.PLAYER, 1, 2),
            make_unit(4, Team.PLAYER, 0, 0),
        )
        assert set(_moves(state, knight, KNIGHT)) == {Cell(2, 2), Cell(2, 0), Cell(1, 3)}

    def test_knight_captures_enemy_on_landing(self, make_unit):
        """An enemy on the landing tile is a capture."""
        knight = make_unit(0, Team.PLAYER, 0, 1, unit_type="B")
        state = _state(knight, make_unit(1, Team.BOSS, 2, 2))
        assert Cell(2, 2) in _moves(state, knight, KNIGHT)

    def test_knight_cannot_land_on_friend_or_barrier(self, make_unit, barrier):
        """Friendly units and blocked tiles are not destinations."""
        knight = make_unit(0, Team.PLAYER, 0, 1, unit_type="B")
        state = _state(knight, make_unit(1, Team.PLAYER, 2, 2)).with_tile_effects(2, 0, [barrier])
        assert _moves(state, knight, KNIGHT) == [Cell(1, 3)]


class TestMissingOrigin:
    """Tests for units that are not on the board."""

    def test_unit_without_tile_has_no_moves(self, empty_state):
        """A live unit without a tile yields nothing."""
        unit = Unit(Team.PLAYER, "A", health=1, damage=1)
        assert legal_moves(empty_state, unit, PAWN, 4, 8) == []
