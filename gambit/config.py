"""
AI Configuration - JSON tuning files for the boss.

A config file may hold any of these sections; missing sections fall back
to the chosen personality (balanced by default):

    {
        "personality": "aggressive",
        "evaluation": {"player_health": 2.5, "danger": 0.8},
        "ordering": {"history": 2.0},
        "worth": {"damage": 0.4},
        "deployment": {"boss_rows_from_top": 2},
        "search": {"target_depth": 2, "move_depth": 4}
    }

Unknown keys and out-of-range values are rejected.
"""

from __future__ import annotations
import json
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field, ValidationError

from .bots.evaluator import DeploymentZones, EvaluationWeights, UnitWorthWeights
from .bots.personality import PERSONALITIES, Personality
from .bots.search import MAX_SUPPORTED_DEPTH, MoveOrderingWeights

# Environment variable naming the default config file
CONFIG_ENV_VAR = "GAMBIT_CONFIG"


class ConfigError(ValueError):
    """A config file could not be read or failed validation."""


# Dataclass defaults the sections start from
_EVAL = EvaluationWeights()
_ORDER = MoveOrderingWeights()
_WORTH = UnitWorthWeights()
_DEPLOY = DeploymentZones()
_BALANCED = PERSONALITIES["balanced"]


# =============================================================================
# Section Models
# =============================================================================

class EvaluationSection(BaseModel):
    """Evaluator weights."""
    unit_value: float = Field(_EVAL.unit_value, ge=0.0)
    player_health: float = Field(_EVAL.player_health, ge=0.0)
    position: float = Field(_EVAL.position, ge=0.0)
    center_position: float = Field(_EVAL.center_position, ge=0.0)
    player_position_penalty_multiplier: float = Field(_EVAL.player_position_penalty_multiplier, ge=0.0)
    lifetime_risk: float = Field(_EVAL.lifetime_risk, ge=0.0)
    lifetime_soft_penalty: float = Field(_EVAL.lifetime_soft_penalty, ge=0.0)
    lifetime_infinite_bonus: float = Field(_EVAL.lifetime_infinite_bonus, ge=0.0)
    player_back_row_threat: float = Field(_EVAL.player_back_row_threat, ge=0.0)
    spawn_threat: float = Field(_EVAL.spawn_threat, ge=0.0)
    spawn_threat_unattackable_multiplier: float = Field(_EVAL.spawn_threat_unattackable_multiplier, ge=0.0)
    spawn_threat_invulnerability_duration_multiplier: float = Field(
        _EVAL.spawn_threat_invulnerability_duration_multiplier, ge=0.0,
    )
    spawn_threat_min_multiplier: float = Field(_EVAL.spawn_threat_min_multiplier, ge=0.0, le=1.0)
    danger: float = Field(_EVAL.danger, ge=0.0)
    danger_amount_multiplier: float = Field(_EVAL.danger_amount_multiplier, ge=0.0)
    danger_undefended_multiplier: float = Field(_EVAL.danger_undefended_multiplier, ge=0.0)
    mobility: float = Field(_EVAL.mobility, ge=0.0)
    player_mobility_penalty_multiplier: float = Field(_EVAL.player_mobility_penalty_multiplier, ge=0.0)
    enable_detail_logging: bool = _EVAL.enable_detail_logging
    enable_unit_value_logging: bool = _EVAL.enable_unit_value_logging

    model_config = {"extra": "forbid"}


class OrderingSection(BaseModel):
    """Move ordering weights."""
    killer_primary: int = Field(_ORDER.killer_primary, ge=0)
    killer_secondary: int = Field(_ORDER.killer_secondary, ge=0)
    capture: int = Field(_ORDER.capture, ge=0)
    heuristic_delta_multiplier: float = Field(_ORDER.heuristic_delta_multiplier, ge=0.0)
    forward_delta_multiplier: int = Field(_ORDER.forward_delta_multiplier, ge=0)
    history: float = Field(_ORDER.history, ge=0.0)

    model_config = {"extra": "forbid"}


class WorthSection(BaseModel):
    """Unit worth weights."""
    damage: float = Field(_WORTH.damage, ge=0.0)
    current_health: float = Field(_WORTH.current_health, ge=0.0)
    lifetime: float = Field(_WORTH.lifetime, ge=0.0)
    worth: float = Field(_WORTH.worth, ge=0.0)
    moves_left: float = Field(_WORTH.moves_left, ge=0.0)
    cant_be_attacked_bonus: float = Field(_WORTH.cant_be_attacked_bonus, ge=0.0)
    infinite_lifetime_bonus: float = Field(_WORTH.infinite_lifetime_bonus, ge=0.0)
    temporary_effect_base_multiplier: float = Field(_WORTH.temporary_effect_base_multiplier, ge=0.0)
    temporary_effect_per_turn_bonus: float = Field(_WORTH.temporary_effect_per_turn_bonus, ge=0.0)
    temporary_effect_min_multiplier: float = Field(_WORTH.temporary_effect_min_multiplier, ge=0.0, le=1.0)

    model_config = {"extra": "forbid"}


class DeploymentSection(BaseModel):
    """Rows each side may spawn into; 0 means no restriction."""
    player_rows_from_bottom: int = Field(_DEPLOY.player_rows_from_bottom, ge=0)
    boss_rows_from_top: int = Field(_DEPLOY.boss_rows_from_top, ge=0)

    model_config = {"extra": "forbid"}


class SearchSection(BaseModel):
    """Search depths."""
    target_depth: int = Field(_BALANCED.target_depth, ge=0, le=MAX_SUPPORTED_DEPTH)
    move_depth: int = Field(_BALANCED.move_depth, ge=0, le=MAX_SUPPORTED_DEPTH)

    model_config = {"extra": "forbid"}


# =============================================================================
# Top-level Config
# =============================================================================

class AiConfig(BaseModel):
    """Everything needed to set up the boss."""
    personality: Optional[str] = Field(None, description="Preset the sections override")
    evaluation: Optional[EvaluationSection] = None
    ordering: Optional[OrderingSection] = None
    worth: Optional[WorthSection] = None
    deployment: DeploymentSection = Field(default_factory=DeploymentSection)
    search: Optional[SearchSection] = None

    model_config = {"extra": "forbid"}

    def deployment_zones(self) -> DeploymentZones:
        return DeploymentZones(**self.deployment.model_dump())

    def to_personality(self, name: str | None = None) -> Personality:
        """
        Build the personality this config describes.

        Args:
            name: Preset to start from; overrides the file's own choice

        Raises:
            ConfigError: If the preset name is unknown
        """
        preset = (name or self.personality or "balanced").lower()
        base = PERSONALITIES.get(preset)
        if base is None:
            choices = ", ".join(sorted(PERSONALITIES))
            raise ConfigError(f"Unknown personality '{preset}' (choose from {choices})")

        return Personality(
            name=base.name,
            description=base.description,
            weights=EvaluationWeights(**self.evaluation.model_dump()) if self.evaluation else base.weights,
            ordering=MoveOrderingWeights(**self.ordering.model_dump()) if self.ordering else base.ordering,
            worth=UnitWorthWeights(**self.worth.model_dump()) if self.worth else base.worth,
            target_depth=self.search.target_depth if self.search else base.target_depth,
            move_depth=self.search.move_depth if self.search else base.move_depth,
            metadata={"preset": preset},
        )


def parse_ai_config(data: dict) -> AiConfig:
    """Validate an already-decoded config mapping."""
    try:
        return AiConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid AI config:\n{e}") from e


def load_ai_config(path: Union[str, Path, None] = None) -> AiConfig:
    """
    Load the AI config.

    Args:
        path: Config file; defaults to $GAMBIT_CONFIG, then built-in defaults

    Raises:
        ConfigError: If the file cannot be read, is not JSON, or fails validation
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return AiConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a JSON object")
    return parse_ai_config(data)
