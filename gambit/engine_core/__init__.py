"""
Engine Core - Movement rules and immutable board snapshots.

The engine is the pure layer that:
1. Describes how each unit archetype moves
2. Resolves legal destinations for a unit
3. Snapshots the live game into immutable states
4. Generates and applies moves on snapshots
5. Starts each side's movement phase
"""

from .state import GameState, UnitSnapshot, UnitEffectSnapshot, TileEffectSnapshot, Team, DurationType
from .movement import MovementRule, MovementDefinition, standard_definition
from .resolver import Cell, legal_moves
from .move import Move
from .move_generator import MoveGenerator
from .attack_map import AttackMap, build_attack_maps
from .phase import begin_phase
from .builder import StateBuilder, BuiltState

__all__ = [
    "GameState",
    "UnitSnapshot",
    "UnitEffectSnapshot",
    "TileEffectSnapshot",
    "Team",
    "DurationType",
    "MovementRule",
    "MovementDefinition",
    "standard_definition",
    "Cell",
    "legal_moves",
    "Move",
    "MoveGenerator",
    "AttackMap",
    "build_attack_maps",
    "begin_phase",
    "StateBuilder",
    "BuiltState",
]
