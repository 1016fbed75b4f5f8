"""
Scenario Loading - Build a Skirmish from a JSON description.

    {
        "board": {"rows": 4, "columns": 8},
        "player_hp": 20,
        "units": [
            {"team": "boss", "unit_type": "B", "row": 3, "column": 2,
             "health": 3, "damage": 2, "lifetime": 4, "worth": 2,
             "effects": [{"effect": "shield", "params": {"duration": 1}}]}
        ],
        "tiles": [{"row": 1, "column": 4, "effect": "barrier"}]
    }

Omitting a unit's "moves" gives it its full move budget.
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from ...bots.evaluator import DeploymentZones
from ...engine_core.state import INFINITE_LIFETIME, Team
from .board import Board
from .effects import TILE_EFFECT_FACTORIES, UNIT_EFFECT_FACTORIES
from .match import Skirmish
from .units import DEFAULT_MAX_EFFECTS, Player, Unit


class ScenarioError(ValueError):
    """A scenario file is malformed or describes an impossible board."""


# =============================================================================
# Scenario Models
# =============================================================================

class EffectSpec(BaseModel):
    """An effect by factory name plus factory arguments."""
    effect: str
    params: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}


class BoardSpec(BaseModel):
    rows: int = Field(4, gt=0)
    columns: int = Field(8, gt=0)

    model_config = {"extra": "forbid"}


class UnitSpec(BaseModel):
    """A unit placed on the board."""
    team: Team
    unit_type: str = Field(description="Movement archetype, A-E")
    row: int = Field(ge=0)
    column: int = Field(ge=0)
    health: int = Field(gt=0)
    damage: int = Field(ge=0)
    lifetime: int = Field(INFINITE_LIFETIME, ge=INFINITE_LIFETIME)
    worth: int = 0
    moves: Optional[int] = Field(None, ge=0)
    max_effects: int = Field(DEFAULT_MAX_EFFECTS, ge=0)
    name: str = ""
    effects: list[EffectSpec] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


class TileSpec(EffectSpec):
    """A tile effect placed on the board."""
    row: int = Field(ge=0)
    column: int = Field(ge=0)


class Scenario(BaseModel):
    board: BoardSpec = Field(default_factory=BoardSpec)
    player_hp: int = Field(20, ge=0)
    units: list[UnitSpec] = Field(default_factory=list)
    tiles: list[TileSpec] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


# =============================================================================
# Loading
# =============================================================================

def load_scenario(
    source: Union[str, Path, dict],
    deployment: DeploymentZones | None = None,
) -> Skirmish:
    """
    Build a live match from a scenario file path or a decoded mapping.

    Raises:
        ScenarioError: If the scenario cannot be read or does not describe a valid board
    """
    data = source if isinstance(source, dict) else _read_json(source)

    try:
        scenario = Scenario.model_validate(data)
    except ValidationError as e:
        raise ScenarioError(f"Invalid scenario:\n{e}") from e

    return build_skirmish(scenario, deployment)


def build_skirmish(scenario: Scenario, deployment: DeploymentZones | None = None) -> Skirmish:
    board = Board(scenario.board.rows, scenario.board.columns)
    game = Skirmish(board, Player(scenario.player_hp), deployment)

    for spec in scenario.tiles:
        tile = board.tile(spec.row, spec.column)
        if tile is None:
            raise ScenarioError(f"Tile effect outside the board at ({spec.row}, {spec.column})")
        tile.effects.append(_create(TILE_EFFECT_FACTORIES, spec, "tile"))

    for spec in scenario.units:
        unit = Unit(
            team=spec.team,
            unit_type=spec.unit_type,
            health=spec.health,
            damage=spec.damage,
            lifetime=spec.lifetime,
            worth=spec.worth,
            max_effects=spec.max_effects,
            name=spec.name,
        )
        for effect_spec in spec.effects:
            unit.add_effect(_create(UNIT_EFFECT_FACTORIES, effect_spec, "unit"))
        unit.remaining_moves = spec.moves if spec.moves is not None else unit.effective_move_count

        try:
            game.place_unit(unit, spec.row, spec.column)
        except ValueError as e:
            raise ScenarioError(str(e)) from e

    return game


def _create(factories: dict, spec: EffectSpec, label: str):
    factory = factories.get(spec.effect)
    if factory is None:
        choices = ", ".join(sorted(factories))
        raise ScenarioError(f"Unknown {label} effect '{spec.effect}' (choose from {choices})")
    try:
        return factory(**spec.params)
    except TypeError as e:
        raise ScenarioError(f"Bad parameters for {label} effect '{spec.effect}': {e}") from e


def _read_json(path: Union[str, Path]) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise ScenarioError(f"Cannot read scenario {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ScenarioError(f"Scenario {path} is not valid JSON: {e}") from e
