"""
Cards - Boss cards that the target selectors resolve.

A unit card spawns a unit; an action card applies an effect to a unit
or a tile, depending on its category.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any

from ...bots.policy import ActionCategory, CardKind
from ...engine_core.state import INFINITE_LIFETIME, Team
from .effects import TILE_EFFECT_FACTORIES, UNIT_EFFECT_FACTORIES, TileEffect, UnitEffect
from .units import Unit

logger = logging.getLogger(__name__)


@dataclass
class UnitCard:
    """Template for the unit a card spawns."""
    unit_type: str
    health: int
    damage: int
    lifetime: int = INFINITE_LIFETIME
    worth: int = 0
    name: str = ""

    kind = CardKind.UNIT

    def create_unit(self, team: Team = Team.BOSS) -> Unit:
        return Unit(
            team=team,
            unit_type=self.unit_type,
            health=self.health,
            damage=self.damage,
            lifetime=self.lifetime,
            worth=self.worth,
            name=self.name,
        )


@dataclass
class ActionCard:
    """
    An action card carrying one effect.

    effect names an entry of the unit or tile effect factories; params
    are passed to that factory.
    """
    category: ActionCategory
    effect: str
    params: dict[str, Any] = field(default_factory=dict)
    name: str = ""

    kind = CardKind.ACTION

    def create_unit_effect(self) -> UnitEffect | None:
        return self._create(UNIT_EFFECT_FACTORIES)

    def create_tile_effect(self) -> TileEffect | None:
        return self._create(TILE_EFFECT_FACTORIES)

    def _create(self, factories: dict):
        """None when the effect is unknown or the params do not fit its factory."""
        factory = factories.get(self.effect)
        if factory is None:
            return None
        try:
            return factory(**self.params)
        except TypeError as e:
            logger.warning("Bad parameters for effect '%s': %s", self.effect, e)
            return None
