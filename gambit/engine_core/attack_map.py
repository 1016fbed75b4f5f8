"""
Attack Maps - How many units of each side threaten each tile.

Jump rules cover their landing tile when they may capture. Slide rules
cover the first occupied tile along their path: an enemy there is
threatened, a friend is defended. Blocked tiles stop threats the same
way they stop movement.
"""

from __future__ import annotations
from dataclasses import dataclass

from .movement import MovementRule, standard_definition
from .state import GameState, Team, UnitSnapshot


@dataclass
class AttackMap:
    """Threat counts for one side, indexed like GameState.tile_effects."""
    rows: int
    columns: int
    counts: list[int]

    @classmethod
    def empty(cls, rows: int, columns: int) -> AttackMap:
        return cls(rows, columns, [0] * (rows * columns))

    def at(self, row: int, column: int) -> int:
        return self.counts[row * self.columns + column]

    def add(self, row: int, column: int) -> None:
        self.counts[row * self.columns + column] += 1


def build_attack_maps(state: GameState) -> dict[Team, AttackMap]:
    """Build the attack map of both sides."""
    maps = {team: AttackMap.empty(state.rows, state.columns) for team in Team}

    for unit in state.units:
        if not unit.is_alive:
            continue
        target = maps[unit.team]
        for rule in standard_definition(unit.unit_type).rules:
            if rule.is_jump:
                _add_jump_threat(state, unit, rule, target)
            else:
                _add_slide_threat(state, unit, rule, target)

    return maps


def _add_jump_threat(state: GameState, unit: UnitSnapshot, rule: MovementRule, attack_map: AttackMap):
    row = unit.row + rule.dy * unit.team.forward_sign
    column = unit.column + rule.dx
    if not state.in_bounds(row, column) or not rule.can_capture:
        return
    if state.is_tile_blocked(row, column):
        return
    attack_map.add(row, column)


def _add_slide_threat(state: GameState, unit: UnitSnapshot, rule: MovementRule, attack_map: AttackMap):
    dy = rule.dy * unit.team.forward_sign
    for step in range(1, rule.max_steps + 1):
        row = unit.row + dy * step
        column = unit.column + rule.dx * step
        if not state.in_bounds(row, column) or state.is_tile_blocked(row, column):
            return

        occupant = state.piece_at(row, column)
        if occupant is None:
            continue
        if rule.can_capture:
            attack_map.add(row, column)
        return
