"""
Move Generator - Legal moves for one side of a snapshot.

Destinations come from the movement resolver. Each move is annotated
with ordering hints:
- is_capture: the destination holds an enemy
- forward_delta: rows gained toward the enemy's back row
- heuristic_delta: MVV-LVA for captures (twice the victim's value minus
  the attacker's) plus a small forward-progress bonus

Moves come back pre-sorted: captures first, then forward progress,
then heuristic delta.
"""

from __future__ import annotations
from typing import Callable

from .move import Move
from .movement import standard_definition
from .resolver import legal_moves
from .state import GameState, Team, UnitSnapshot

# Weight of forward progress inside heuristic_delta
FORWARD_HEURISTIC_MULTIPLIER = 0.1


def _worth(unit: UnitSnapshot) -> float:
    return float(unit.worth)


class MoveGenerator:
    """
    Enumerates moves on snapshots.

    value_of scores a unit for MVV-LVA; the search passes its unit value
    calculator. Without one, the unit's worth constant is used.
    """

    def __init__(self, value_of: Callable[[UnitSnapshot], float] | None = None):
        self.value_of = value_of or _worth

    def generate(self, state: GameState, team: Team) -> list[Move]:
        """All legal moves for team's living units that still have moves left."""
        moves: list[Move] = []

        for unit in state.units_of(team):
            if unit.moves_left <= 0:
                continue
            definition = standard_definition(unit.unit_type)
            for cell in legal_moves(state, unit, definition, state.rows, state.columns):
                moves.append(self._build_move(state, unit, cell.row, cell.column))

        moves.sort(key=lambda m: (m.is_capture, m.forward_delta, m.heuristic_delta), reverse=True)
        return moves

    def count(self, state: GameState, team: Team) -> int:
        """
        Mobility: legal destinations of every living unit of team.

        Units count whether or not they have moves left this phase.
        """
        total = 0
        for unit in state.units_of(team):
            definition = standard_definition(unit.unit_type)
            total += len(legal_moves(state, unit, definition, state.rows, state.columns))
        return total

    def has_moves(self, state: GameState, team: Team, this_phase: bool = True) -> bool:
        """
        Whether team has any legal move.

        With this_phase=False, units without moves left also count, which
        answers "could this side ever move again from here".
        """
        for unit in state.units_of(team):
            if this_phase and unit.moves_left <= 0:
                continue
            definition = standard_definition(unit.unit_type)
            if legal_moves(state, unit, definition, state.rows, state.columns):
                return True
        return False

    def _build_move(self, state: GameState, unit: UnitSnapshot, row: int, column: int) -> Move:
        forward = (row - unit.row) * unit.team.forward_sign
        heuristic = forward * FORWARD_HEURISTIC_MULTIPLIER

        occupant = state.piece_at(row, column)
        is_capture = occupant is not None and occupant.team is not unit.team
        if is_capture:
            heuristic += self.value_of(occupant) * 2 - self.value_of(unit)

        return Move(
            unit_id=unit.id,
            to_row=row,
            to_col=column,
            is_capture=is_capture,
            forward_delta=forward,
            heuristic_delta=heuristic,
        )
