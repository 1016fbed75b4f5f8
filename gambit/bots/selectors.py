"""
Target Selectors - Search-backed targeting for boss cards.

Every selector follows the same steps:
1. Enumerate valid candidates from the live game
2. Fail with NO_VALID_TARGET if there are none
3. Return the only candidate straight away, without searching
4. Fall back to a random candidate if no snapshot can be built or the
   search depth is not positive
5. Otherwise simulate each candidate on the root snapshot and score it
   with the minimax search; keep the best
6. Decline (NOT_BENEFICIAL) unless the best beats the untouched position
7. Map the winner back to its live object

BossCardTargetResolver dispatches a card to the right selector.
"""

from __future__ import annotations
import logging
import random
from typing import Callable, Iterable, Protocol, Sequence, TypeVar

from ..engine_core.builder import BuiltState, StateBuilder, snapshot_tile_effect, snapshot_unit_effect
from ..engine_core.state import BASE_MOVES_PER_TURN, GameState, Team, UnitSnapshot
from .evaluator import DeploymentZones
from .policy import (
    ActionCategory,
    CardKind,
    DecisionMethod,
    TargetErrorCode,
    TargetResult,
    TargetSelector,
)
from .search import MinimaxSearch

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Search depth used for card targeting
DEFAULT_TARGET_DEPTH = 2

# Card attributes a simulated spawn reads
UNIT_CARD_FIELDS = ("unit_type", "health", "damage", "lifetime", "worth")


class TargetTile(Protocol):
    row: int
    column: int

    @property
    def is_occupied(self) -> bool: ...

    @property
    def is_blocked(self) -> bool: ...


class TargetBoard(Protocol):
    rows: int
    columns: int

    def row_tiles(self, row: int) -> list[TargetTile]: ...

    def tiles(self) -> Iterable[TargetTile]: ...


class BuffableUnit(Protocol):
    @property
    def is_alive(self) -> bool: ...

    @property
    def has_max_effects(self) -> bool: ...

    def has_effect_kind(self, kind: str) -> bool: ...


class BossRoster(Protocol):
    @property
    def boss_units(self) -> list[BuffableUnit]: ...


class SearchTargetSelector(TargetSelector):
    """
    Shared machinery for search-backed selectors.

    builder may be None; selection then degrades to a random choice.
    """

    def __init__(
        self,
        search: MinimaxSearch,
        builder: StateBuilder | None = None,
        depth: int = DEFAULT_TARGET_DEPTH,
        seed: int | None = None,
    ):
        self.search = search
        self.builder = builder
        self.depth = depth
        self.rng = random.Random(seed)

    def _decide(
        self,
        candidates: Sequence[T],
        simulate: Callable[[BuiltState, T], GameState | None],
        label: str,
    ) -> TargetResult:
        """Run steps 2-6 over candidates; the target is a candidate."""
        if not candidates:
            logger.info("%s: no valid %s", self.get_name(), label)
            return TargetResult.failure(f"No valid {label}", TargetErrorCode.NO_VALID_TARGET)

        if len(candidates) == 1:
            return TargetResult.success_with_target(
                candidates[0], DecisionMethod.ONLY_CANDIDATE, evaluated_candidates=1,
            )

        if self.depth <= 0:
            return self._random(candidates, "search depth is not positive")

        built = self.builder.build() if self.builder is not None else None
        if built is None:
            return self._random(candidates, "no snapshot available")

        current = self.search.evaluate(built.state, self.depth, Team.BOSS)
        best, best_score, evaluated = None, float("-inf"), 0

        for candidate in candidates:
            simulated = simulate(built, candidate)
            if simulated is None:
                continue
            score = self.search.evaluate(simulated, self.depth, Team.BOSS)
            evaluated += 1
            if score > best_score:
                best, best_score = candidate, score

        if best is None:
            return TargetResult.failure(
                f"No {label} could be simulated", TargetErrorCode.ID_MAPPING,
                current_score=current,
            )

        if best_score <= current:
            logger.info(
                "%s: best %s scores %.3f, not above current %.3f; declining",
                self.get_name(), label, best_score, current,
            )
            return TargetResult.failure(
                f"No {label} improves the position", TargetErrorCode.NOT_BENEFICIAL,
                evaluated_candidates=evaluated, best_score=best_score, current_score=current,
            )

        logger.info("%s: chose %s (score %.3f, current %.3f)", self.get_name(), best, best_score, current)
        return TargetResult.success_with_target(
            best, DecisionMethod.SEARCH,
            evaluated_candidates=evaluated, best_score=best_score, current_score=current,
        )

    def _random(self, candidates: Sequence[T], reason: str) -> TargetResult:
        logger.warning("%s: %s; choosing a random target", self.get_name(), reason)
        return TargetResult.success_with_target(
            self.rng.choice(list(candidates)), DecisionMethod.RANDOM,
        )


class SpawnTargetSelector(SearchTargetSelector):
    """Chooses the tile a boss unit card spawns on."""

    def __init__(self, board: TargetBoard, search: MinimaxSearch, builder: StateBuilder | None = None,
                 depth: int = DEFAULT_TARGET_DEPTH, deployment: DeploymentZones | None = None,
                 seed: int | None = None):
        super().__init__(search, builder, depth, seed)
        self.board = board
        self.deployment = deployment or DeploymentZones()

    def candidates(self) -> list[TargetTile]:
        """Free tiles on the boss's spawn row."""
        row = self.board.rows - max(1, self.deployment.boss_rows_from_top)
        return [tile for tile in self.board.row_tiles(row) if not tile.is_occupied]

    def select(self, card) -> TargetResult:
        if card is None or any(getattr(card, name, None) is None for name in UNIT_CARD_FIELDS):
            logger.warning("Spawn selection needs a unit card with %s", ", ".join(UNIT_CARD_FIELDS))
            return TargetResult.failure("Missing unit card", TargetErrorCode.INVALID_INPUT)

        def simulate(built: BuiltState, tile: TargetTile) -> GameState:
            state = built.state
            spawned = UnitSnapshot(
                id=state.next_unit_id(),
                team=Team.BOSS,
                unit_type=card.unit_type,
                row=tile.row,
                column=tile.column,
                health=card.health,
                damage=card.damage,
                lifetime=card.lifetime,
                worth=card.worth,
                moves_left=BASE_MOVES_PER_TURN,
            )
            return state.with_added_unit(spawned)

        return self._decide(self.candidates(), simulate, "spawn tile")


class BuffTargetSelector(SearchTargetSelector):
    """Chooses the boss unit that receives a unit effect."""

    def __init__(self, roster: BossRoster, search: MinimaxSearch, builder: StateBuilder | None = None,
                 depth: int = DEFAULT_TARGET_DEPTH, seed: int | None = None):
        super().__init__(search, builder, depth, seed)
        self.roster = roster

    def candidates(self, effect_kind: str) -> list[BuffableUnit]:
        """Living boss units without this effect and with room for another."""
        return [
            unit for unit in self.roster.boss_units
            if unit.is_alive and not unit.has_effect_kind(effect_kind) and not unit.has_max_effects
        ]

    def select(self, card) -> TargetResult:
        effect = card.create_unit_effect() if card is not None else None
        if effect is None:
            logger.warning("Buff selection needs a card with a unit effect")
            return TargetResult.failure("Card has no unit effect", TargetErrorCode.INVALID_INPUT)

        candidates = self.candidates(effect.kind)
        snapshot = snapshot_unit_effect(effect)

        def simulate(built: BuiltState, live) -> GameState | None:
            unit_id = _snapshot_id(built, live)
            if unit_id is None:
                logger.warning("Could not map %s to a snapshot unit", live)
                return None
            unit = built.state.unit_by_id(unit_id)
            return built.state.with_unit(unit.with_effect(snapshot))

        return self._decide(candidates, simulate, "buff target")


class TileEffectTargetSelector(SearchTargetSelector):
    """Chooses the tile that receives a tile effect."""

    def __init__(self, board: TargetBoard, search: MinimaxSearch, builder: StateBuilder | None = None,
                 depth: int = DEFAULT_TARGET_DEPTH, seed: int | None = None):
        super().__init__(search, builder, depth, seed)
        self.board = board

    def candidates(self) -> list[TargetTile]:
        return [tile for tile in self.board.tiles() if not tile.is_blocked]

    def select(self, card) -> TargetResult:
        effect = card.create_tile_effect() if card is not None else None
        if effect is None:
            logger.warning("Tile selection needs a card with a tile effect")
            return TargetResult.failure("Card has no tile effect", TargetErrorCode.INVALID_INPUT)

        snapshot = snapshot_tile_effect(effect)

        def simulate(built: BuiltState, tile: TargetTile) -> GameState:
            return built.state.with_tile_effects(tile.row, tile.column, [snapshot])

        return self._decide(self.candidates(), simulate, "tile")


def _snapshot_id(built: BuiltState, live) -> int | None:
    for unit_id, unit in built.id_to_unit.items():
        if unit is live:
            return unit_id
    return None


class BossCardTargetResolver:
    """
    Routes a boss card to the selector for its kind.

    Unit cards go to the spawn selector. Action cards go to the buff or
    tile selector by category; other categories are not targetable.
    """

    def __init__(
        self,
        spawn: SpawnTargetSelector,
        buff: BuffTargetSelector,
        tile: TileEffectTargetSelector,
    ):
        self.spawn = spawn
        self.buff = buff
        self.tile = tile

    def resolve(self, card) -> TargetResult:
        if card is None:
            logger.warning("Cannot resolve a target for a missing card")
            return TargetResult.failure("Missing card", TargetErrorCode.INVALID_INPUT)

        kind = getattr(card, "kind", None)
        if kind is CardKind.UNIT:
            return self.spawn.select(card)
        if kind is CardKind.ACTION:
            category = getattr(card, "category", None)
            if category is ActionCategory.BUFF:
                return self.buff.select(card)
            if category is ActionCategory.TILE:
                return self.tile.select(card)
            logger.warning("Unhandled action card category %s", category)
            return TargetResult.failure(
                f"Unsupported action category: {category}", TargetErrorCode.UNSUPPORTED_CARD,
            )

        logger.warning("Unknown card kind %s", kind)
        return TargetResult.failure(f"Unsupported card kind: {kind}", TargetErrorCode.UNSUPPORTED_CARD)
