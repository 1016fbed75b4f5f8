"""
Bots module - Boss decision making.

Provides:
- BossEvaluator: Scores board snapshots for the boss
- MinimaxSearch: Alpha-beta search with killer/history move ordering
- Target selectors: Spawn tiles, buff targets and tile effect placement
- BossAutoMover: Plays the boss's movement phase
- Personality: Configurable play styles
"""

from .policy import TargetResult, TargetErrorCode, TargetSelector, DecisionMethod, CardKind, ActionCategory
from .evaluator import (
    BossEvaluator,
    DeploymentZones,
    EvaluationWeights,
    StateEvaluation,
    UnitValueCalculator,
    UnitWorthWeights,
)
from .search import MinimaxSearch, MoveOrderingWeights, SearchStats
from .selectors import (
    BossCardTargetResolver,
    BuffTargetSelector,
    SpawnTargetSelector,
    TileEffectTargetSelector,
)
from .auto_move import BossAutoMover, AutoMoveReport, StopReason
from .personality import Personality, PERSONALITIES

__all__ = [
    "TargetResult",
    "TargetErrorCode",
    "TargetSelector",
    "DecisionMethod",
    "CardKind",
    "ActionCategory",
    "BossEvaluator",
    "DeploymentZones",
    "EvaluationWeights",
    "StateEvaluation",
    "UnitValueCalculator",
    "UnitWorthWeights",
    "MinimaxSearch",
    "MoveOrderingWeights",
    "SearchStats",
    "BossCardTargetResolver",
    "BuffTargetSelector",
    "SpawnTargetSelector",
    "TileEffectTargetSelector",
    "BossAutoMover",
    "AutoMoveReport",
    "StopReason",
    "Personality",
    "PERSONALITIES",
]
