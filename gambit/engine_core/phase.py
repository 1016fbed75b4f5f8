"""
Phase Transitions - Start-of-phase bookkeeping on snapshots.

When a side's movement phase begins, its units tick their temporary
effects (dropping expired ones) and receive a fresh move budget. The
other side's units have no moves. Tile effects tick only when the boss
phase begins.
"""

from __future__ import annotations
import logging
from dataclasses import replace

from .state import GameState, Team

logger = logging.getLogger(__name__)


def begin_phase(state: GameState, team: Team) -> GameState:
    """Return the state at the start of team's movement phase."""
    units = []
    for unit in state.units:
        if not unit.is_alive:
            logger.warning("Dead unit %d found during phase transition", unit.id)
            units.append(unit.with_moves_left(0))
            continue

        if unit.team is not team:
            units.append(unit.with_moves_left(0))
            continue

        effects = tuple(e for e in (effect.tick() for effect in unit.effects) if not e.is_expired)
        ticked = unit.with_effects(effects)
        units.append(ticked.with_moves_left(ticked.effective_move_count))

    tile_effects = state.tile_effects
    if team is Team.BOSS:
        tile_effects = tuple(
            tuple(e for e in (effect.tick() for effect in tile) if not e.is_expired)
            for tile in tile_effects
        )

    return replace(state, units=tuple(units), tile_effects=tile_effects)
