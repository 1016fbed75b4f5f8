"""
Minimax Search - Depth-limited adversarial search over snapshots.

The boss maximizes the evaluator's score and the player minimizes it.
A ply is one action by the side to move: a unit move, or a pass that
ends its phase. Either way the opponent's phase begins next and the
search recurses one ply shallower.

Move ordering, best first:
1. Killer moves (two slots per ply, reset for every decision)
2. Captures
3. History score of quiet moves that caused cutoffs
4. Heuristic delta and forward delta, weighted

Depth is the only bound on cost; there is no time cutoff.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from ..engine_core.move import Move
from ..engine_core.move_generator import MoveGenerator
from ..engine_core.phase import begin_phase
from ..engine_core.state import GameState, Team
from .evaluator import BossEvaluator

logger = logging.getLogger(__name__)

MAX_SUPPORTED_DEPTH = 32

KILLER_SLOTS = 2


@dataclass(frozen=True)
class MoveOrderingWeights:
    """Bonuses that decide which children are searched first."""
    killer_primary: int = 1_000_000
    killer_secondary: int = 900_000
    capture: int = 500_000
    heuristic_delta_multiplier: float = 100.0
    forward_delta_multiplier: int = 10
    history: float = 1.0


@dataclass
class SearchStats:
    """Counters for one decision."""
    nodes_visited: int = 0
    cutoffs: int = 0
    child_skips: int = 0
    max_depth_reached: int = 0
    nodes_per_depth: list[int] = field(default_factory=list)
    evals_per_depth: list[int] = field(default_factory=list)
    boss_moves_per_depth: list[int] = field(default_factory=list)
    player_moves_per_depth: list[int] = field(default_factory=list)

    @classmethod
    def for_depth(cls, depth: int) -> SearchStats:
        size = depth + 1
        return cls(
            nodes_per_depth=[0] * size,
            evals_per_depth=[0] * size,
            boss_moves_per_depth=[0] * size,
            player_moves_per_depth=[0] * size,
        )

    def summary(self) -> str:
        lines = [
            f"{self.nodes_visited} nodes, {self.cutoffs} cutoffs, "
            f"{self.child_skips} skipped children, max depth {self.max_depth_reached}"
        ]
        for d, nodes in enumerate(self.nodes_per_depth):
            lines.append(
                f"  d={d}: nodes={nodes}, evals={self.evals_per_depth[d]}, "
                f"boss_moves={self.boss_moves_per_depth[d]}, "
                f"player_moves={self.player_moves_per_depth[d]}"
            )
        return "\n".join(lines)


class MinimaxSearch:
    """
    Alpha-beta minimax for the boss.

    Killer and history tables live on the instance and are cleared at
    the start of every evaluate() / find_best_move() call.
    """

    def __init__(
        self,
        evaluator: BossEvaluator | None = None,
        ordering: MoveOrderingWeights | None = None,
        move_generator: MoveGenerator | None = None,
    ):
        self.evaluator = evaluator or BossEvaluator()
        self.ordering = ordering or MoveOrderingWeights()
        self.move_generator = move_generator or MoveGenerator(self.evaluator.value_calculator.value)

        self.killers: list[list[tuple[Move, float] | None]] = []
        self.history: dict[Move, int] = {}
        self.stats = SearchStats()
        self._root_depth = 0
        self._reset(0)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def evaluate(self, state: GameState, depth: int, active_team: Team = Team.BOSS) -> float:
        """
        Score state with a depth-limited search.

        Args:
            state: Root snapshot (never modified)
            depth: Plies to search; 0 or less returns the static evaluation
            active_team: Side to move at the root

        Returns:
            Score from the boss's point of view
        """
        if depth <= 0:
            return self.evaluator.evaluate(state, depth)

        depth = self._clamp_depth(depth)
        self._reset(depth)
        score = self._search(state, depth, float("-inf"), float("inf"), active_team)
        logger.debug("Search score %.3f after %s", score, self.stats.summary())
        return score

    def find_best_move(self, state: GameState, depth: int) -> Move | None:
        """
        Pick the boss's next action at the start of or during its phase.

        Returns the best move, Move.pass_() when ending the phase scores
        best, or None when the boss has no real move or depth is 0.
        """
        if depth <= 0:
            return None

        depth = self._clamp_depth(depth)
        self._reset(depth)

        moves = self.move_generator.generate(state, Team.BOSS)
        if not moves:
            return None

        alpha, beta = float("-inf"), float("inf")
        best_move = Move.pass_()
        best_value = self._search(begin_phase(state, Team.PLAYER), depth - 1, alpha, beta, Team.PLAYER)
        alpha = best_value

        self._order(moves, 0)
        for explored, move in enumerate(moves, start=1):
            child = begin_phase(state.apply_move(move, Team.BOSS), Team.PLAYER)
            score = self._search(child, depth - 1, alpha, beta, Team.PLAYER)
            if score > best_value:
                best_value = score
                best_move = move
            alpha = max(alpha, score)
            if alpha >= beta:
                self._record_cutoff(move, score, 0, depth - 1, True, len(moves) - explored)
                break

        logger.debug("Best move %s value %.3f after %s", best_move, best_value, self.stats.summary())
        return best_move

    # ------------------------------------------------------------------
    # Recursion
    # ------------------------------------------------------------------

    def _search(self, state: GameState, depth: int, alpha: float, beta: float, team: Team) -> float:
        stats = self.stats
        stats.nodes_visited += 1
        ply = min(max(self._root_depth - depth, 0), len(stats.nodes_per_depth) - 1)
        stats.nodes_per_depth[ply] += 1
        stats.max_depth_reached = max(stats.max_depth_reached, ply)

        if depth <= 0 or self._is_terminal(state):
            stats.evals_per_depth[ply] += 1
            return self.evaluator.evaluate(state, depth)

        maximizing = team is Team.BOSS
        moves = self.move_generator.generate(state, team)
        if maximizing:
            stats.boss_moves_per_depth[ply] += len(moves)
        else:
            stats.player_moves_per_depth[ply] += len(moves)

        self._order(moves, ply)
        children = moves + [Move.pass_()]
        opponent = team.opponent
        value = float("-inf") if maximizing else float("inf")

        for explored, move in enumerate(children, start=1):
            child = begin_phase(state.apply_move(move, team), opponent)
            score = self._search(child, depth - 1, alpha, beta, opponent)

            if maximizing:
                value = max(value, score)
                alpha = max(alpha, score)
            else:
                value = min(value, score)
                beta = min(beta, score)

            if alpha >= beta:
                self._record_cutoff(move, score, ply, depth - 1, maximizing, len(children) - explored)
                break

        return value

    def _is_terminal(self, state: GameState) -> bool:
        if state.player_hp <= 0:
            return True
        if self.move_generator.has_moves(state, Team.BOSS, this_phase=False):
            return False
        return not self.move_generator.has_moves(state, Team.PLAYER, this_phase=False)

    # ------------------------------------------------------------------
    # Move ordering
    # ------------------------------------------------------------------

    def order_score(self, move: Move, ply: int) -> float:
        """Ordering key of move at ply; higher is searched first."""
        if move.is_pass:
            return float("-inf")

        w = self.ordering
        score = 0.0
        slots = self.killers[ply] if ply < len(self.killers) else [None] * KILLER_SLOTS
        if slots[0] is not None and slots[0][0] == move:
            score += w.killer_primary
        elif slots[1] is not None and slots[1][0] == move:
            score += w.killer_secondary

        if move.is_capture:
            score += w.capture

        score += self.history.get(move, 0) * w.history
        score += move.heuristic_delta * w.heuristic_delta_multiplier
        score += move.forward_delta * w.forward_delta_multiplier
        return score

    def _order(self, moves: list[Move], ply: int) -> None:
        if len(moves) > 1:
            moves.sort(key=lambda m: self.order_score(m, ply), reverse=True)

    def _record_cutoff(self, move: Move, score: float, ply: int, remaining: int, maximizing: bool, skipped: int):
        self.stats.cutoffs += 1
        self.stats.child_skips += skipped

        # Killers and history only track quiet moves
        if move.is_pass or move.is_capture:
            return

        self._register_killer(move, score if maximizing else -score, ply)
        self.history[move] = self.history.get(move, 0) + remaining * remaining + 1

    def _register_killer(self, move: Move, strength: float, ply: int) -> None:
        """
        Store a cutoff move for ply.

        strength is the cutoff score seen from the side that moved, so
        higher is always better.
        """
        if ply >= len(self.killers):
            return
        slots = self.killers[ply]
        first = slots[0]

        if first is not None and first[0] == move:
            if strength > first[1]:
                slots[0] = (move, strength)
            return

        if first is None or strength > first[1]:
            slots[1] = first
            slots[0] = (move, strength)
        else:
            slots[1] = (move, strength)

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def _reset(self, depth: int) -> None:
        self.killers = [[None] * KILLER_SLOTS for _ in range(MAX_SUPPORTED_DEPTH)]
        self.history = {}
        self.stats = SearchStats.for_depth(depth)
        self._root_depth = depth

    @staticmethod
    def _clamp_depth(depth: int) -> int:
        if depth > MAX_SUPPORTED_DEPTH:
            logger.warning("Search depth %d exceeds %d; clamping", depth, MAX_SUPPORTED_DEPTH)
            return MAX_SUPPORTED_DEPTH
        return depth
