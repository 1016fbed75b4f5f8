"""
Boss Personalities - Configurable play styles.

Personalities adjust:
- Evaluation weights (what the boss values)
- Move ordering weights (what the search tries first)
- Unit worth weights (how much a single unit is worth)
- Search depth for card targeting and for the auto-move phase
"""

from __future__ import annotations
import random
from dataclasses import dataclass, field, fields, replace
from typing import Any

from .evaluator import BossEvaluator, DeploymentZones, EvaluationWeights, UnitValueCalculator, UnitWorthWeights
from .search import MinimaxSearch, MoveOrderingWeights


@dataclass
class Personality:
    """
    A boss personality that defines play style.

    Personalities can be:
    - Predefined (balanced, aggressive, defensive, swarm)
    - Generated (random variations)
    - Loaded from a config file
    """
    name: str
    description: str = ""

    weights: EvaluationWeights = field(default_factory=EvaluationWeights)
    ordering: MoveOrderingWeights = field(default_factory=MoveOrderingWeights)
    worth: UnitWorthWeights = field(default_factory=UnitWorthWeights)

    # Plies searched per decision
    target_depth: int = 2
    move_depth: int = 4

    metadata: dict[str, Any] = field(default_factory=dict)

    def build_search(self, deployment: DeploymentZones | None = None) -> MinimaxSearch:
        """A fresh search wired with this personality's weights."""
        evaluator = BossEvaluator(self.weights, UnitValueCalculator(self.worth), deployment)
        return MinimaxSearch(evaluator, self.ordering)


# ============================================================================
# Predefined Personalities
# ============================================================================

BALANCED = Personality(
    name="Balanced",
    description="Shipped tuning; weighs material, threats and safety evenly",
)


AGGRESSIVE = Personality(
    name="Aggressive",
    description="Pushes units at the player's back row and accepts losses",
    weights=EvaluationWeights(
        player_health=3.0,  # Hurting the player matters most
        position=0.4,
        player_back_row_threat=2.5,
        danger=0.5,  # Less concerned with hanging units
        lifetime_risk=0.4,
    ),
    worth=UnitWorthWeights(damage=0.5, current_health=0.15),
)


DEFENSIVE = Personality(
    name="Defensive",
    description="Keeps units alive and shuts down player spawns",
    weights=EvaluationWeights(
        unit_value=1.3,
        player_health=1.5,
        spawn_threat=3.0,
        danger=1.8,
        danger_undefended_multiplier=1.0,
    ),
    worth=UnitWorthWeights(current_health=0.35, cant_be_attacked_bonus=1.5),
    move_depth=3,
)


SWARM = Personality(
    name="Swarm",
    description="Values unit count and mobility over individual units",
    weights=EvaluationWeights(
        unit_value=1.5,
        center_position=0.35,
        mobility=0.3,
        lifetime_infinite_bonus=0.4,
    ),
    worth=UnitWorthWeights(worth=0.3, moves_left=0.3),
    target_depth=1,
)


# All predefined personalities
PERSONALITIES: dict[str, Personality] = {
    "balanced": BALANCED,
    "aggressive": AGGRESSIVE,
    "defensive": DEFENSIVE,
    "swarm": SWARM,
}


def create_random_personality(
    name: str = "Random",
    base: Personality | None = None,
    variance: float = 0.3,
    seed: int | None = None,
) -> Personality:
    """
    Create a personality with random variations.

    Args:
        name: Name for the personality
        base: Base personality to vary from (default: BALANCED)
        variance: How much to vary (0-1)
        seed: Random seed for reproducibility
    """
    rng = random.Random(seed)

    base = base or BALANCED

    def vary(value: float) -> float:
        """Apply random variation to a value."""
        delta = value * variance * (rng.random() * 2 - 1)
        return max(0.0, value + delta)

    def vary_all(weights):
        changes = {}
        for f in fields(weights):
            value = getattr(weights, f.name)
            if isinstance(value, float):
                changes[f.name] = vary(value)
        return replace(weights, **changes)

    new_weights = vary_all(base.weights)
    # Keep the floor a valid fraction
    new_weights = replace(
        new_weights,
        spawn_threat_min_multiplier=min(1.0, new_weights.spawn_threat_min_multiplier),
    )

    return Personality(
        name=name,
        description=f"Randomly varied from {base.name}",
        weights=new_weights,
        ordering=base.ordering,
        worth=vary_all(base.worth),
        target_depth=base.target_depth,
        move_depth=base.move_depth,
        metadata={"base": base.name, "variance": variance, "seed": seed},
    )
