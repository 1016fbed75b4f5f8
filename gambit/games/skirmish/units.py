"""
Units - Live units and the player.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import reduce
from typing import TYPE_CHECKING

from ...engine_core.state import BASE_MOVES_PER_TURN, INFINITE_LIFETIME, Team
from .effects import UnitEffect

if TYPE_CHECKING:
    from .board import Tile

# Effects a unit can carry at once
DEFAULT_MAX_EFFECTS = 2


@dataclass(eq=False)
class Unit:
    """
    A unit on the live board.

    Identity matters: two units with the same stats are still different
    units, so equality is by object.
    """
    team: Team
    unit_type: str
    health: int
    damage: int
    lifetime: int = INFINITE_LIFETIME
    worth: int = 0
    remaining_moves: int = 0
    active_effects: list[UnitEffect] = field(default_factory=list)
    max_effects: int = DEFAULT_MAX_EFFECTS
    name: str = ""

    tile: Tile | None = field(default=None, repr=False)

    @property
    def row(self) -> int | None:
        return self.tile.row if self.tile else None

    @property
    def column(self) -> int | None:
        return self.tile.column if self.tile else None

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    @property
    def can_be_attacked(self) -> bool:
        return all(effect.can_be_attacked for effect in self.active_effects)

    @property
    def effective_damage(self) -> int:
        layers = [e.stat_layer for e in self.active_effects if e.stat_layer is not None]
        return max(0, reduce(lambda value, layer: layer.modify_damage(value), layers, self.damage))

    @property
    def effective_move_count(self) -> int:
        layers = [e.stat_layer for e in self.active_effects if e.stat_layer is not None]
        return max(0, reduce(lambda value, layer: layer.modify_move_count(value), layers, BASE_MOVES_PER_TURN))

    def has_effect_kind(self, kind: str) -> bool:
        return any(effect.kind == kind for effect in self.active_effects)

    @property
    def has_max_effects(self) -> bool:
        return len(self.active_effects) >= self.max_effects

    def add_effect(self, effect: UnitEffect) -> None:
        self.active_effects.append(effect)

    def tick_effects(self) -> None:
        """Count down temporary effects and drop the expired ones."""
        for effect in self.active_effects:
            effect.tick()
        self.active_effects = [e for e in self.active_effects if not e.is_expired]

    def __str__(self) -> str:
        label = self.name or f"{self.team.value} {self.unit_type}"
        if self.tile is None:
            return label
        return f"{label} at ({self.row}, {self.column})"


@dataclass
class Player:
    """The human side's health pool."""
    current_hp: int = 20

    def take_damage(self, amount: int) -> None:
        self.current_hp = max(0, self.current_hp - amount)
