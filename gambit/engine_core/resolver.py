"""
Board Movement Resolver - Legal destinations for a piece.

The resolver is a pure function over a read-only board view, so the same
rules serve the live board and the simulation snapshots.

- Jump rules look at exactly one cell and ignore everything in between.
- Slide rules walk step by step and stop at the first occupied cell.
  That cell is added only if it holds a capturable enemy and the rule
  may capture.
- A tile blocked by a tile effect (e.g. a barrier) stops a slide and
  cannot be landed on.
"""

from __future__ import annotations
import logging
from typing import NamedTuple, Protocol

from .movement import MovementDefinition, MovementRule
from .state import Team

logger = logging.getLogger(__name__)


class Cell(NamedTuple):
    row: int
    column: int


class Piece(Protocol):
    """What the resolver needs to know about the moving piece."""
    team: Team
    row: int | None
    column: int | None


class Occupant(Protocol):
    team: Team
    can_be_attacked: bool


class BoardView(Protocol):
    """Read-only occupancy of a board."""

    def piece_at(self, row: int, column: int) -> Occupant | None: ...

    def is_tile_blocked(self, row: int, column: int) -> bool: ...


def legal_moves(
    board: BoardView,
    unit: Piece,
    definition: MovementDefinition,
    rows: int,
    columns: int,
) -> list[Cell]:
    """
    Get every tile the unit can move to.

    Args:
        board: Occupancy view of the board
        unit: The moving piece
        definition: The piece's movement rules
        rows: Board height
        columns: Board width

    Returns:
        Destination cells in rule order; empty if the unit has no origin
    """
    if unit.row is None or unit.column is None:
        logger.warning("Unit without an origin tile has no legal moves")
        return []

    destinations: list[Cell] = []
    sign = unit.team.forward_sign

    for rule in definition.rules:
        if rule.is_jump:
            _resolve_jump(board, unit, rule, sign, rows, columns, destinations)
        else:
            _resolve_slide(board, unit, rule, sign, rows, columns, destinations)

    return destinations


def _resolve_jump(board, unit, rule: MovementRule, sign, rows, columns, out):
    row = unit.row + rule.dy * sign
    column = unit.column + rule.dx
    if not (0 <= row < rows and 0 <= column < columns):
        return
    if board.is_tile_blocked(row, column):
        return

    occupant = board.piece_at(row, column)
    if occupant is None:
        if rule.can_move_to_empty:
            out.append(Cell(row, column))
    elif occupant.team is not unit.team and occupant.can_be_attacked and rule.can_capture:
        out.append(Cell(row, column))


def _resolve_slide(board, unit, rule: MovementRule, sign, rows, columns, out):
    dy = rule.dy * sign
    for step in range(1, rule.max_steps + 1):
        row = unit.row + dy * step
        column = unit.column + rule.dx * step
        if not (0 <= row < rows and 0 <= column < columns):
            return
        if board.is_tile_blocked(row, column):
            return

        occupant = board.piece_at(row, column)
        if occupant is None:
            if rule.can_move_to_empty:
                out.append(Cell(row, column))
            continue

        if occupant.team is not unit.team and occupant.can_be_attacked and rule.can_capture:
            out.append(Cell(row, column))
        return
