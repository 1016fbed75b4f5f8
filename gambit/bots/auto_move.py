"""
Boss Auto-Move - Drives the boss's movement phase.

Each step snapshots the live game, asks the search for the best move and
executes it on the live game. The phase ends when the search prefers to
pass, when no boss unit can move, or when a move cannot be mapped back
or executed. The phase right after the boss's opening setup is skipped.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from ..engine_core.builder import StateBuilder
from ..engine_core.move import Move
from ..engine_core.state import Team
from .search import MinimaxSearch

logger = logging.getLogger(__name__)

# Plies searched per auto-move step
DEFAULT_MOVE_DEPTH = 4

# Upper bound on steps in one phase
MAX_PHASE_STEPS = 64


class MoveExecutor(Protocol):
    def execute(self, unit: Any, row: int, column: int) -> bool: ...


class StopReason(str, Enum):
    """Why an auto-move phase ended."""
    SKIPPED_AFTER_SETUP = "skipped_after_setup"
    NO_SNAPSHOT = "no_snapshot"
    NO_MOVES = "no_moves"
    PASSED = "passed"
    ID_MAPPING = "id_mapping"
    EXECUTION_FAILED = "execution_failed"
    STEP_LIMIT = "step_limit"


@dataclass
class AutoMoveReport:
    """What happened during one boss phase."""
    moves: list[Move] = field(default_factory=list)
    stop_reason: StopReason | None = None

    @property
    def moves_made(self) -> int:
        return len(self.moves)


class BossAutoMover:
    """Plays the boss's movement phase one searched move at a time."""

    def __init__(self, search: MinimaxSearch, depth: int = DEFAULT_MOVE_DEPTH):
        self.search = search
        self.depth = depth
        self._skip_next_phase = False

    def on_setup_complete(self) -> None:
        """The boss just placed its opening units; they do not move this phase."""
        self._skip_next_phase = True

    def run_phase(self, builder: StateBuilder | None, executor: MoveExecutor) -> AutoMoveReport:
        report = AutoMoveReport()

        if self._skip_next_phase:
            self._skip_next_phase = False
            logger.info("Skipping boss movement right after setup")
            report.stop_reason = StopReason.SKIPPED_AFTER_SETUP
            return report

        for _ in range(MAX_PHASE_STEPS):
            built = builder.build() if builder is not None else None
            if built is None:
                logger.warning("No snapshot available; ending boss phase")
                report.stop_reason = StopReason.NO_SNAPSHOT
                break

            if not any(u.moves_left > 0 for u in built.state.units_of(Team.BOSS)):
                report.stop_reason = StopReason.NO_MOVES
                break

            move = self.search.find_best_move(built.state, self.depth)
            if move is None:
                report.stop_reason = StopReason.NO_MOVES
                break
            if move.is_pass:
                report.stop_reason = StopReason.PASSED
                break

            unit = built.live_unit(move.unit_id)
            if unit is None:
                logger.warning("Move %s names unknown unit id %d", move, move.unit_id)
                report.stop_reason = StopReason.ID_MAPPING
                break

            if not executor.execute(unit, move.to_row, move.to_col):
                logger.warning("Executor rejected %s", move)
                report.stop_reason = StopReason.EXECUTION_FAILED
                break

            report.moves.append(move)
        else:
            report.stop_reason = StopReason.STEP_LIMIT

        logger.info("Boss phase ended (%s) after %d move(s)", report.stop_reason.value, report.moves_made)
        return report
