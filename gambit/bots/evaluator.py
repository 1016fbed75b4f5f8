"""
Boss Evaluator - Scores board snapshots for the boss decision engine.

The evaluator assigns a score to a snapshot from the boss's point of
view (positive is good for the boss). The score is a weighted sum of:
- Player health
- Unit values (boss and player separately)
- Position (boss advance, player advance)
- Center-row bias
- Boss unit lifetime
- Player back-row threats
- Spawn threats (boss units a freshly spawned pawn could take)
- Danger (boss units the player attacks next turn)
- Mobility

Weights can be adjusted to create different personalities.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, fields

from ..engine_core.attack_map import build_attack_maps
from ..engine_core.move_generator import MoveGenerator
from ..engine_core.state import (
    BASE_MOVES_PER_TURN,
    DurationType,
    GameState,
    Team,
    UnitSnapshot,
)

logger = logging.getLogger(__name__)

# Score of a position where the player is dead. Finite so alpha-beta
# bounds stay comparable.
WINNING_SCORE = 100000.0


@dataclass(frozen=True)
class EvaluationWeights:
    """
    Weights for the boss evaluator.

    Higher values = more importance.
    """
    unit_value: float = 1.0
    player_health: float = 2.0

    # Position
    position: float = 0.2
    center_position: float = 0.2
    player_position_penalty_multiplier: float = 0.5

    # Lifetime (boss units)
    lifetime_risk: float = 0.7  # Exactly one turn left
    lifetime_soft_penalty: float = 0.3  # Two or three turns left
    lifetime_infinite_bonus: float = 0.25

    player_back_row_threat: float = 1.5

    # Spawn threat
    spawn_threat: float = 2.0
    spawn_threat_unattackable_multiplier: float = 0.25
    spawn_threat_invulnerability_duration_multiplier: float = 0.15
    spawn_threat_min_multiplier: float = 0.1

    # Danger
    danger: float = 1.0
    danger_amount_multiplier: float = 0.25  # Per extra attacker
    danger_undefended_multiplier: float = 0.75

    # Mobility
    mobility: float = 0.1
    player_mobility_penalty_multiplier: float = 1.0

    # Debug output
    enable_detail_logging: bool = False
    enable_unit_value_logging: bool = False


@dataclass(frozen=True)
class UnitWorthWeights:
    """Weights for the per-unit value used by the evaluator and move ordering."""
    damage: float = 0.3
    current_health: float = 0.2
    lifetime: float = 0.15
    worth: float = 0.15
    moves_left: float = 0.2
    cant_be_attacked_bonus: float = 1.0
    infinite_lifetime_bonus: float = 1.0

    # Stat effects that will run out are worth less
    temporary_effect_base_multiplier: float = 1.0
    temporary_effect_per_turn_bonus: float = 0.5
    temporary_effect_min_multiplier: float = 0.25


@dataclass(frozen=True)
class DeploymentZones:
    """
    Rows each side may deploy into.

    0 means no restriction.
    """
    player_rows_from_bottom: int = 1
    boss_rows_from_top: int = 1


# ============================================================================
# Unit value
# ============================================================================

@dataclass
class UnitValueBreakdown:
    """Where a unit's value comes from."""
    unit_id: int
    base_damage_part: float = 0.0
    base_health_part: float = 0.0
    base_worth_part: float = 0.0
    base_moves_part: float = 0.0
    lifetime_part: float = 0.0
    infinite_lifetime_bonus: float = 0.0
    unattackable_bonus: float = 0.0
    temp_damage_part: float = 0.0
    temp_move_part: float = 0.0

    @property
    def total(self) -> float:
        return sum(getattr(self, f.name) for f in fields(self) if f.name != "unit_id")

    def __str__(self) -> str:
        return (
            f"unit {self.unit_id}: total={self.total:.3f} "
            f"(dmg={self.base_damage_part:.3f}, hp={self.base_health_part:.3f}, "
            f"worth={self.base_worth_part:.3f}, moves={self.base_moves_part:.3f}, "
            f"lifetime={self.lifetime_part:.3f}, infinite={self.infinite_lifetime_bonus:.3f}, "
            f"unattackable={self.unattackable_bonus:.3f}, "
            f"temp_dmg={self.temp_damage_part:.3f}, temp_moves={self.temp_move_part:.3f})"
        )


class UnitValueCalculator:
    """Computes the dynamic value of a unit snapshot."""

    def __init__(self, weights: UnitWorthWeights | None = None):
        self.weights = weights or UnitWorthWeights()

    def value(self, unit: UnitSnapshot) -> float:
        return self.breakdown(unit).total

    def breakdown(self, unit: UnitSnapshot) -> UnitValueBreakdown:
        w = self.weights
        bd = UnitValueBreakdown(unit_id=unit.id)

        bd.base_damage_part = unit.damage * w.damage
        bd.base_health_part = unit.health * w.current_health
        bd.base_worth_part = unit.worth * w.worth
        bd.base_moves_part = unit.moves_left * w.moves_left

        if unit.has_infinite_lifetime:
            bd.infinite_lifetime_bonus = w.infinite_lifetime_bonus
        else:
            bd.lifetime_part = unit.lifetime * w.lifetime

        if not unit.can_be_attacked:
            bd.unattackable_bonus = w.cant_be_attacked_bonus

        for effect in unit.effects:
            layer = effect.stat_layer
            if layer is None:
                continue

            damage_delta = layer.modify_damage(unit.damage) - unit.damage
            moves_delta = layer.modify_move_count(BASE_MOVES_PER_TURN) - BASE_MOVES_PER_TURN

            multiplier = 1.0
            if effect.duration_type is DurationType.TEMPORARY:
                turns = max(0, effect.remaining_duration)
                multiplier = w.temporary_effect_base_multiplier + turns * w.temporary_effect_per_turn_bonus
                multiplier = min(max(multiplier, w.temporary_effect_min_multiplier), 1.0)

            bd.temp_damage_part += damage_delta * w.damage * multiplier
            bd.temp_move_part += moves_delta * w.moves_left * multiplier

        return bd


# ============================================================================
# Evaluation
# ============================================================================

@dataclass
class StateEvaluation:
    """
    Component breakdown of one evaluation.

    total is always the plain sum of the eleven components.
    """
    player_hp: float = 0.0
    boss_units: float = 0.0
    player_units: float = 0.0
    boss_position: float = 0.0
    player_position: float = 0.0
    center_bias: float = 0.0
    lifetime: float = 0.0
    player_threats: float = 0.0
    spawn_threats: float = 0.0
    danger: float = 0.0
    mobility: float = 0.0

    # Diagnostics, not part of the total
    boss_unit_count: int = 0
    boss_unit_raw_sum: float = 0.0
    is_win: bool = False

    COMPONENTS = (
        "player_hp", "boss_units", "player_units", "boss_position", "player_position",
        "center_bias", "lifetime", "player_threats", "spawn_threats", "danger", "mobility",
    )

    @property
    def total(self) -> float:
        return sum(getattr(self, name) for name in self.COMPONENTS)

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in self.COMPONENTS}

    def format(self) -> str:
        lines = [f"Total = {self.total:.3f}"]
        for name in self.COMPONENTS:
            lines.append(f"  {name} = {getattr(self, name):.3f}")
        lines.append(f"  (boss units: count={self.boss_unit_count}, raw_sum={self.boss_unit_raw_sum:.3f})")
        return "\n".join(lines)


class BossEvaluator:
    """
    Evaluates snapshots using weighted heuristics.

    Used at the leaves of the minimax search and by the target selectors
    to score the unmodified position.
    """

    def __init__(
        self,
        weights: EvaluationWeights | None = None,
        value_calculator: UnitValueCalculator | None = None,
        deployment: DeploymentZones | None = None,
    ):
        self.weights = weights or EvaluationWeights()
        self.value_calculator = value_calculator or UnitValueCalculator()
        self.deployment = deployment or DeploymentZones()
        self._mobility = MoveGenerator(self.value_calculator.value)

    def evaluate(self, state: GameState, depth: int = 0) -> float:
        """Score state for the boss. depth rewards faster wins."""
        return self.evaluate_detailed(state, depth).total

    def evaluate_detailed(self, state: GameState, depth: int = 0) -> StateEvaluation:
        """Score state and keep the component breakdown."""
        if state.player_hp <= 0:
            return StateEvaluation(player_hp=WINNING_SCORE + depth, is_win=True)

        w = self.weights
        ev = StateEvaluation(player_hp=-state.player_hp * w.player_health)
        values: dict[int, float] = {}
        center_row = state.rows // 2

        for unit in state.units:
            if not unit.is_alive:
                logger.warning("Evaluating dead unit %d; skipping", unit.id)
                continue

            value = self.value_calculator.value(unit)
            values[unit.id] = value

            if center_row > 0:
                center = (1 - abs(unit.row - center_row) / center_row) * w.center_position
            else:
                center = 0.0

            if unit.team is Team.BOSS:
                ev.boss_units += value * w.unit_value
                ev.boss_unit_raw_sum += value
                ev.boss_unit_count += 1
                if w.enable_unit_value_logging:
                    logger.debug("Boss unit value %s", self.value_calculator.breakdown(unit))

                ev.boss_position += (state.rows - 1 - unit.row) * w.position
                ev.center_bias += center
                ev.lifetime += self._lifetime_term(unit, value)
            else:
                ev.player_units -= value * w.unit_value
                ev.player_position -= unit.row * w.position * w.player_position_penalty_multiplier
                ev.center_bias -= center

                distance = state.rows - 1 - unit.row
                if distance <= 1:
                    ev.player_threats -= unit.effective_damage * (1 - distance) * w.player_back_row_threat

        ev.spawn_threats = self._spawn_threats(state, values)
        ev.danger = self._danger(state, values)

        boss_mobility = self._mobility.count(state, Team.BOSS)
        player_mobility = self._mobility.count(state, Team.PLAYER)
        ev.mobility = (boss_mobility - player_mobility * w.player_mobility_penalty_multiplier) * w.mobility

        if w.enable_detail_logging:
            logger.debug("Evaluation breakdown:\n%s", ev.format())

        return ev

    def _lifetime_term(self, unit: UnitSnapshot, value: float) -> float:
        w = self.weights
        if unit.has_infinite_lifetime:
            return value * w.lifetime_infinite_bonus
        if unit.lifetime == 1:
            return -value * w.lifetime_risk
        if 1 < unit.lifetime < 4:
            return -value * w.lifetime_soft_penalty
        return 0.0

    def _spawn_threats(self, state: GameState, values: dict[int, float]) -> float:
        """
        Penalty for boss units right above the player's back row.

        A pawn spawned on a free diagonal tile of row 0 captures them on
        its first move.
        """
        w = self.weights
        spawn_row = 0
        penalty = 0.0

        for unit in state.units_of(Team.BOSS):
            distance = unit.row - spawn_row
            if distance <= 0:
                continue
            if self.deployment.player_rows_from_bottom > 0 and distance > self.deployment.player_rows_from_bottom:
                continue
            if unit.row != spawn_row + 1:
                continue

            threats = 0
            for column in (unit.column - 1, unit.column + 1):
                if not 0 <= column < state.columns:
                    continue
                if state.is_tile_blocked(spawn_row, column) or state.piece_at(spawn_row, column) is not None:
                    continue
                threats += 1
            if threats == 0:
                continue

            multiplier = 1.0
            for effect in unit.effects:
                if effect.can_be_attacked:
                    continue
                multiplier *= w.spawn_threat_unattackable_multiplier
                if effect.is_temporary and effect.remaining_duration > 0:
                    multiplier *= 1 - effect.remaining_duration * w.spawn_threat_invulnerability_duration_multiplier
            multiplier = min(max(multiplier, w.spawn_threat_min_multiplier), 1.0)

            penalty -= values[unit.id] * threats * w.spawn_threat * multiplier

        return penalty

    def _danger(self, state: GameState, values: dict[int, float]) -> float:
        """Penalty for attackable boss units the player threatens, worse when undefended."""
        w = self.weights
        maps = build_attack_maps(state)
        penalty = 0.0

        for unit in state.units_of(Team.BOSS):
            if not unit.can_be_attacked:
                continue
            attackers = maps[Team.PLAYER].at(unit.row, unit.column)
            if attackers <= 0:
                continue
            defenders = maps[Team.BOSS].at(unit.row, unit.column)

            multiplier = 1 + w.danger_amount_multiplier * (attackers - 1)
            if defenders == 0:
                multiplier += w.danger_undefended_multiplier

            penalty -= values[unit.id] * multiplier * w.danger

        return penalty
