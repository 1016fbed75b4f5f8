"""
Stat Layers - Pure stat transformations carried by unit effects.

A layer never holds references to live objects and has no timing logic.
Effects apply their layers in order to compute a unit's effective
damage and the number of moves it receives at the start of its phase.
"""

from __future__ import annotations
from dataclasses import dataclass


class StatLayer:
    """Base layer: leaves every stat unchanged."""

    def modify_damage(self, value: int) -> int:
        return value

    def modify_move_count(self, value: int) -> int:
        return value


@dataclass(frozen=True)
class AddDamageLayer(StatLayer):
    """Adds a flat amount to damage."""
    amount: int

    def modify_damage(self, value: int) -> int:
        return value + self.amount


@dataclass(frozen=True)
class AddMovesLayer(StatLayer):
    """Adds extra moves per turn."""
    amount: int

    def modify_move_count(self, value: int) -> int:
        return value + self.amount


@dataclass(frozen=True)
class MultiplyDamageLayer(StatLayer):
    """Multiplies damage, rounding to the nearest integer."""
    multiplier: float

    def modify_damage(self, value: int) -> int:
        return round(value * self.multiplier)
