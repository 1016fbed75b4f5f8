"""
Live Effects - Mutable effects attached to live units and tiles.

Unlike the snapshot effects, live effects count down in place when a
phase begins and are removed by their owner once expired.
"""

from __future__ import annotations
from dataclasses import dataclass

from ...engine_core.stat_layers import (
    AddDamageLayer,
    AddMovesLayer,
    MultiplyDamageLayer,
    StatLayer,
)
from ...engine_core.state import DurationType


@dataclass
class UnitEffect:
    """
    An effect on a live unit.

    kind identifies the effect family; a unit never carries two effects
    of the same kind.
    """
    kind: str = "effect"
    duration_type: DurationType = DurationType.TEMPORARY
    remaining_duration: int = 1
    can_be_attacked: bool = True
    stat_layer: StatLayer | None = None
    thorns_reflection: float = 0.0

    @property
    def is_expired(self) -> bool:
        return self.duration_type is DurationType.TEMPORARY and self.remaining_duration <= 0

    def tick(self) -> None:
        if self.duration_type is DurationType.TEMPORARY:
            self.remaining_duration -= 1


def shield_effect(duration: int = 1) -> UnitEffect:
    """Unit cannot be attacked while active."""
    return UnitEffect(kind="shield", remaining_duration=duration, can_be_attacked=False)


def thorns_effect(reflection: float = 0.5, duration: int = 2) -> UnitEffect:
    """Reflects a share of incoming attack damage to the attacker."""
    return UnitEffect(kind="thorns", remaining_duration=duration, thorns_reflection=reflection)


def attack_bonus_effect(amount: int = 1, duration: int = 2) -> UnitEffect:
    return UnitEffect(kind="attack", remaining_duration=duration, stat_layer=AddDamageLayer(amount))


def attack_multiplier_effect(multiplier: float = 2.0, duration: int = 1) -> UnitEffect:
    return UnitEffect(kind="multiplier", remaining_duration=duration, stat_layer=MultiplyDamageLayer(multiplier))


def bonus_moves_effect(amount: int = 1, duration: int = 1) -> UnitEffect:
    return UnitEffect(kind="moves", remaining_duration=duration, stat_layer=AddMovesLayer(amount))


@dataclass
class TileEffect:
    """An effect on a live tile."""
    kind: str = "tile"
    duration_type: DurationType = DurationType.TEMPORARY
    remaining_duration: int = 1
    occupies_tile: bool = False

    @property
    def is_expired(self) -> bool:
        return self.duration_type is DurationType.TEMPORARY and self.remaining_duration <= 0

    def tick(self) -> None:
        if self.duration_type is DurationType.TEMPORARY:
            self.remaining_duration -= 1


def barrier_effect(duration: int = 2) -> TileEffect:
    """Blocks the tile for movement and spawning."""
    return TileEffect(kind="barrier", remaining_duration=duration, occupies_tile=True)


UNIT_EFFECT_FACTORIES = {
    "shield": shield_effect,
    "thorns": thorns_effect,
    "attack": attack_bonus_effect,
    "multiplier": attack_multiplier_effect,
    "moves": bonus_moves_effect,
}

TILE_EFFECT_FACTORIES = {
    "barrier": barrier_effect,
}
