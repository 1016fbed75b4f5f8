"""
Skirmish - An in-memory live game for the boss decision engine.

The match owns the board, the unit roster and the player. It is the
live side of the state builder (board, roster and player views) and
executes the moves the boss chooses with the same combat, back-row and
lifetime rules the snapshots simulate.
"""

from __future__ import annotations
import logging

from ...bots.evaluator import DeploymentZones
from ...engine_core.builder import StateBuilder
from ...engine_core.movement import standard_definition
from ...engine_core.resolver import Cell, legal_moves
from ...engine_core.state import BASE_MOVES_PER_TURN, Team
from .board import Board, Tile
from .cards import UnitCard
from .effects import TileEffect, UnitEffect
from .units import Player, Unit

logger = logging.getLogger(__name__)


class Skirmish:
    """A match between the player and the boss."""

    def __init__(
        self,
        board: Board | None = None,
        player: Player | None = None,
        deployment: DeploymentZones | None = None,
    ):
        self.board = board or Board()
        self.player = player or Player()
        self.deployment = deployment or DeploymentZones()
        self.units: list[Unit] = []

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------

    @property
    def all_units(self) -> list[Unit]:
        """Living units in roster order."""
        return [u for u in self.units if u.is_alive]

    @property
    def boss_units(self) -> list[Unit]:
        return [u for u in self.all_units if u.team is Team.BOSS]

    @property
    def player_units(self) -> list[Unit]:
        return [u for u in self.all_units if u.team is Team.PLAYER]

    def state_builder(self) -> StateBuilder:
        return StateBuilder(self.board, self, self.player)

    def place_unit(self, unit: Unit, row: int, column: int) -> Unit:
        """Put a unit on an empty, unblocked tile."""
        tile = self.board.tile(row, column)
        if tile is None:
            raise ValueError(f"No tile at ({row}, {column})")
        if tile.is_occupied:
            raise ValueError(f"Tile ({row}, {column}) is occupied")
        tile.unit = unit
        unit.tile = tile
        self.units.append(unit)
        return unit

    def remove_unit(self, unit: Unit) -> None:
        if unit.tile is not None:
            unit.tile.unit = None
            unit.tile = None
        if unit in self.units:
            self.units.remove(unit)

    # ------------------------------------------------------------------
    # Card targets
    # ------------------------------------------------------------------

    def boss_spawn_row(self) -> int:
        """Row the boss spawns into (its back row by default)."""
        return self.board.rows - max(1, self.deployment.boss_rows_from_top)

    def spawn_candidates(self) -> list[Tile]:
        return [tile for tile in self.board.row_tiles(self.boss_spawn_row()) if not tile.is_occupied]

    def spawn(self, card: UnitCard, tile: Tile, team: Team = Team.BOSS) -> Unit:
        unit = card.create_unit(team)
        unit.remaining_moves = BASE_MOVES_PER_TURN
        return self.place_unit(unit, tile.row, tile.column)

    def apply_unit_effect(self, unit: Unit, effect: UnitEffect) -> bool:
        if unit.has_effect_kind(effect.kind) or unit.has_max_effects:
            logger.warning("%s cannot take another %s effect", unit, effect.kind)
            return False
        unit.add_effect(effect)
        return True

    def apply_tile_effect(self, tile: Tile, effect: TileEffect) -> bool:
        if tile.is_blocked:
            logger.warning("%r is already blocked", tile)
            return False
        tile.effects.append(effect)
        return True

    # ------------------------------------------------------------------
    # Turn flow
    # ------------------------------------------------------------------

    def begin_phase(self, team: Team) -> None:
        """Start team's movement phase on the live board."""
        for unit in self.all_units:
            if unit.team is team:
                unit.tick_effects()
                unit.remaining_moves = unit.effective_move_count
            else:
                unit.remaining_moves = 0

        if team is Team.BOSS:
            for tile in self.board.tiles():
                for effect in tile.effects:
                    effect.tick()
                tile.effects = [e for e in tile.effects if not e.is_expired]

    def legal_destinations(self, unit: Unit) -> list[Cell]:
        definition = standard_definition(unit.unit_type)
        return legal_moves(self.board, unit, definition, self.board.rows, self.board.columns)

    def execute(self, unit: Unit, row: int, column: int) -> bool:
        """
        Move a unit, fighting whatever enemy stands on the destination.

        Returns False without changing anything if the move is illegal.
        """
        if not unit.is_alive or unit.tile is None:
            logger.warning("Cannot move %s: not on the board", unit)
            return False
        if unit.remaining_moves <= 0:
            logger.warning("Cannot move %s: no moves left", unit)
            return False
        if Cell(row, column) not in self.legal_destinations(unit):
            logger.warning("Illegal move for %s to (%d, %d)", unit, row, column)
            return False

        defender = self.board.piece_at(row, column)
        if defender is not None and defender.team is not unit.team:
            if not self._fight(unit, defender):
                return True

        if self._is_enemy_back_row(row, unit.team):
            if unit.team is Team.BOSS:
                self.player.take_damage(unit.effective_damage)
                logger.info("%s reached the player's back row; player HP %d", unit, self.player.current_hp)
                self.remove_unit(unit)
                return True
        elif unit.lifetime > 0:
            unit.lifetime -= 1
            if unit.lifetime <= 0:
                logger.info("%s expired", unit)
                self.remove_unit(unit)
                return True

        unit.remaining_moves -= 1
        self._relocate(unit, row, column)
        return True

    def _fight(self, attacker: Unit, defender: Unit) -> bool:
        """Resolve combat; True if the attacker goes on to take the tile."""
        damage = attacker.effective_damage
        defender.health -= damage

        if attacker.can_be_attacked:
            for effect in defender.active_effects:
                if effect.thorns_reflection > 0:
                    attacker.health -= round(damage * effect.thorns_reflection)

        if not defender.is_alive:
            self.remove_unit(defender)
        if not attacker.is_alive:
            self.remove_unit(attacker)
            return False
        if defender.is_alive:
            attacker.remaining_moves -= 1
            return False
        return True

    def _relocate(self, unit: Unit, row: int, column: int) -> None:
        target = self.board.tile(row, column)
        unit.tile.unit = None
        target.unit = unit
        unit.tile = target

    def _is_enemy_back_row(self, row: int, team: Team) -> bool:
        return row == (self.board.rows - 1 if team is Team.PLAYER else 0)
