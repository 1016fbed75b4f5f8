"""
Skirmish - An in-memory live game for the boss engine.

Provides the board, units, live effects and cards that the state
builder snapshots and that the boss's decisions are applied to.
"""

from .board import Board, Tile
from .cards import ActionCard, UnitCard
from .effects import TileEffect, UnitEffect, barrier_effect
from .match import Skirmish
from .scenario import ScenarioError, load_scenario
from .units import Player, Unit

__all__ = [
    "Board",
    "Tile",
    "ActionCard",
    "UnitCard",
    "TileEffect",
    "UnitEffect",
    "barrier_effect",
    "Skirmish",
    "ScenarioError",
    "load_scenario",
    "Player",
    "Unit",
]
