"""
Game State - Immutable board snapshots for simulation.

Design principles:
- Immutable: every mutation-producing operation returns a new state
- Self-contained: no references back to live game objects
- Comparable: two snapshots are equal when their contents are equal
- Cheap to derive: unchanged units and tile effects are shared between states

Unit ids are assigned once when a root snapshot is built and never
change inside one search tree. They index the live unit roster so the
winning snapshot element can be mapped back to a live unit.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import reduce
from typing import TYPE_CHECKING, Iterator

from .stat_layers import StatLayer

if TYPE_CHECKING:
    from .move import Move

logger = logging.getLogger(__name__)

# Moves a unit receives at the start of its phase before stat layers
BASE_MOVES_PER_TURN = 1

# Lifetime value meaning "never expires"
INFINITE_LIFETIME = -1


class Team(Enum):
    """The two opposing sides."""
    PLAYER = "player"
    BOSS = "boss"

    @property
    def opponent(self) -> Team:
        return Team.BOSS if self is Team.PLAYER else Team.PLAYER

    @property
    def forward_sign(self) -> int:
        """Row direction this side advances in (player +1, boss -1)."""
        return 1 if self is Team.PLAYER else -1


class DurationType(Enum):
    """How long an effect lasts."""
    TEMPORARY = "temporary"
    PERMANENT = "permanent"
    INSTANT = "instant"


@dataclass(frozen=True)
class UnitEffectSnapshot:
    """
    An effect active on a unit.

    remaining_duration only counts down for temporary effects; other
    kinds carry -1.
    """
    duration_type: DurationType = DurationType.PERMANENT
    remaining_duration: int = -1
    can_be_attacked: bool = True
    stat_layer: StatLayer | None = None
    thorns_reflection: float = 0.0  # Fraction of incoming damage reflected

    @property
    def is_temporary(self) -> bool:
        return self.duration_type is DurationType.TEMPORARY

    @property
    def is_expired(self) -> bool:
        return self.is_temporary and self.remaining_duration <= 0

    def tick(self) -> UnitEffectSnapshot:
        """Advance one turn. Only temporary effects count down."""
        if not self.is_temporary:
            return self
        return replace(self, remaining_duration=self.remaining_duration - 1)


@dataclass(frozen=True)
class TileEffectSnapshot:
    """An effect placed on a tile (e.g. a barrier)."""
    duration_type: DurationType = DurationType.TEMPORARY
    remaining_duration: int = -1
    occupies_tile: bool = False

    @property
    def is_expired(self) -> bool:
        return self.duration_type is DurationType.TEMPORARY and self.remaining_duration <= 0

    def tick(self) -> TileEffectSnapshot:
        if self.duration_type is not DurationType.TEMPORARY:
            return self
        return replace(self, remaining_duration=self.remaining_duration - 1)


@dataclass(frozen=True)
class UnitSnapshot:
    """A unit on the board at one point of a simulation."""
    id: int
    team: Team
    unit_type: str
    row: int
    column: int
    health: int
    damage: int
    lifetime: int = INFINITE_LIFETIME
    worth: int = 0
    moves_left: int = 0
    effects: tuple[UnitEffectSnapshot, ...] = ()

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    @property
    def has_infinite_lifetime(self) -> bool:
        return self.lifetime == INFINITE_LIFETIME

    @property
    def can_be_attacked(self) -> bool:
        """A unit is attackable only if every active effect allows it."""
        return all(effect.can_be_attacked for effect in self.effects)

    @property
    def effective_damage(self) -> int:
        layers = [e.stat_layer for e in self.effects if e.stat_layer is not None]
        damage = reduce(lambda value, layer: layer.modify_damage(value), layers, self.damage)
        return max(0, damage)

    @property
    def effective_move_count(self) -> int:
        layers = [e.stat_layer for e in self.effects if e.stat_layer is not None]
        moves = reduce(lambda value, layer: layer.modify_move_count(value), layers, BASE_MOVES_PER_TURN)
        return max(0, moves)

    def with_position(self, row: int, column: int) -> UnitSnapshot:
        return replace(self, row=row, column=column)

    def with_health(self, health: int) -> UnitSnapshot:
        return replace(self, health=health)

    def with_lifetime(self, lifetime: int) -> UnitSnapshot:
        return replace(self, lifetime=lifetime)

    def with_moves_left(self, moves_left: int) -> UnitSnapshot:
        return replace(self, moves_left=moves_left)

    def with_effects(self, effects) -> UnitSnapshot:
        return replace(self, effects=tuple(effects))

    def with_effect(self, effect: UnitEffectSnapshot) -> UnitSnapshot:
        return replace(self, effects=self.effects + (effect,))


@dataclass(frozen=True)
class GameState:
    """
    The whole board as an immutable value.

    tile_effects is the flattened board, one tuple of effects per tile,
    indexed by row * columns + column.
    """
    rows: int
    columns: int
    player_hp: int
    units: tuple[UnitSnapshot, ...] = ()
    tile_effects: tuple[tuple[TileEffectSnapshot, ...], ...] = ()

    # Occupancy index, derived from units
    _occupancy: dict = field(default=None, init=False, repr=False, compare=False, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "units", tuple(self.units))
        tiles = tuple(tuple(effects) for effects in self.tile_effects)
        if not tiles:
            tiles = tuple(() for _ in range(self.rows * self.columns))
        elif len(tiles) != self.rows * self.columns:
            raise ValueError(
                f"Expected {self.rows * self.columns} tile effect lists, got {len(tiles)}"
            )
        object.__setattr__(self, "tile_effects", tiles)

        occupancy = {}
        for unit in self.units:
            if not unit.is_alive:
                continue
            occupancy[(unit.row, unit.column)] = unit
        object.__setattr__(self, "_occupancy", occupancy)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def in_bounds(self, row: int, column: int) -> bool:
        return 0 <= row < self.rows and 0 <= column < self.columns

    def tile_index(self, row: int, column: int) -> int:
        return row * self.columns + column

    def piece_at(self, row: int, column: int) -> UnitSnapshot | None:
        return self._occupancy.get((row, column))

    def tile_effects_at(self, row: int, column: int) -> tuple[TileEffectSnapshot, ...]:
        return self.tile_effects[self.tile_index(row, column)]

    def is_tile_blocked(self, row: int, column: int) -> bool:
        return any(effect.occupies_tile for effect in self.tile_effects_at(row, column))

    def unit_by_id(self, unit_id: int) -> UnitSnapshot | None:
        for unit in self.units:
            if unit.id == unit_id:
                return unit
        return None

    def units_of(self, team: Team) -> Iterator[UnitSnapshot]:
        """Living units of one side, in snapshot order."""
        return (u for u in self.units if u.team is team and u.is_alive)

    def next_unit_id(self) -> int:
        return max((u.id for u in self.units), default=-1) + 1

    # ------------------------------------------------------------------
    # Derivations (always return a new state)
    # ------------------------------------------------------------------

    def _copy_with(self, **kwargs) -> GameState:
        return replace(self, **kwargs)

    def with_player_hp(self, player_hp: int) -> GameState:
        return self._copy_with(player_hp=player_hp)

    def with_unit(self, unit: UnitSnapshot) -> GameState:
        """Replace the unit with the same id."""
        return self._copy_with(units=tuple(unit if u.id == unit.id else u for u in self.units))

    def with_added_unit(self, unit: UnitSnapshot) -> GameState:
        return self._copy_with(units=self.units + (unit,))

    def without_units(self, *unit_ids: int) -> GameState:
        return self._copy_with(units=tuple(u for u in self.units if u.id not in unit_ids))

    def with_tile_effects(self, row: int, column: int, effects) -> GameState:
        tiles = list(self.tile_effects)
        tiles[self.tile_index(row, column)] = tuple(effects)
        return self._copy_with(tile_effects=tuple(tiles))

    # ------------------------------------------------------------------
    # Move application
    # ------------------------------------------------------------------

    def is_enemy_back_row(self, row: int, team: Team) -> bool:
        """Whether row is the last row from team's point of view."""
        if team is Team.PLAYER:
            return row == self.rows - 1
        return row == 0

    def apply_move(self, move: Move, team: Team) -> GameState:
        """
        Apply one move by team and return the resulting state.

        Capturing deals the attacker's effective damage to the defender.
        Thorns on the defender reflect part of it back if the attacker
        can be attacked. A defender that survives stays put and so does
        the attacker, which still spends a move. A boss unit entering the
        player's back row hits the player and leaves the board; any other
        move off the enemy back row ticks the unit's lifetime.
        """
        if move.is_pass:
            return self

        mover = self.unit_by_id(move.unit_id)
        if mover is None:
            logger.warning("Move for unknown unit id %d ignored", move.unit_id)
            return self
        if mover.team is not team:
            logger.warning("Unit %d does not belong to %s; move ignored", mover.id, team.value)
            return self

        state = self
        target = self.piece_at(move.to_row, move.to_col)
        if target is not None and target.team is not team:
            state, mover = self._resolve_capture(mover, target)
            if mover is None:
                return state

        lifetime = mover.lifetime
        if state.is_enemy_back_row(move.to_row, team):
            if team is Team.BOSS:
                player_hp = max(0, state.player_hp - mover.effective_damage)
                return state.without_units(mover.id).with_player_hp(player_hp)
        elif lifetime > 0:
            lifetime -= 1
            if lifetime <= 0:
                return state.without_units(mover.id)

        moved = replace(
            mover,
            row=move.to_row,
            column=move.to_col,
            lifetime=lifetime,
            moves_left=max(0, mover.moves_left - 1),
        )
        return state.with_unit(moved)

    def _resolve_capture(
        self,
        attacker: UnitSnapshot,
        defender: UnitSnapshot,
    ) -> tuple[GameState, UnitSnapshot | None]:
        """
        Resolve combat.

        Returns the new state and the attacker that goes on to move,
        or None when the attack ends the move.
        """
        damage = attacker.effective_damage
        defender_hp = defender.health - damage

        if attacker.can_be_attacked:
            for effect in defender.effects:
                if effect.thorns_reflection <= 0:
                    continue
                reflected = round(damage * effect.thorns_reflection)
                attacker = attacker.with_health(attacker.health - reflected)

        state = self
        removed = []
        if defender_hp > 0:
            state = state.with_unit(defender.with_health(defender_hp))
        else:
            removed.append(defender.id)
        if attacker.is_alive and defender_hp > 0:
            state = state.with_unit(attacker.with_moves_left(max(0, attacker.moves_left - 1)))
        elif attacker.is_alive:
            state = state.with_unit(attacker)
        else:
            removed.append(attacker.id)
        if removed:
            state = state.without_units(*removed)

        if attacker.is_alive and defender_hp <= 0:
            return state, attacker
        return state, None
