"""
Tests for the minimax search and its move ordering.

Tests:
- Depth 0 is the static evaluation
- Pruning never changes the result
- Killer and history tables
- Best move selection
"""

from dataclasses import replace

import pytest

from ..bots.evaluator import WINNING_SCORE
from ..bots.search import MAX_SUPPORTED_DEPTH, MinimaxSearch, MoveOrderingWeights
from ..engine_core.move import Move
from ..engine_core.phase import begin_phase
from ..engine_core.state import GameState, Team


def plain_minimax(search, state, depth, team):
    """Reference minimax with the same traversal and no pruning."""
    if depth <= 0 or search._is_terminal(state):
        return search.evaluator.evaluate(state, depth)

    children = search.move_generator.generate(state, team) + [Move.pass_()]
    scores = [
        plain_minimax(search, begin_phase(state.apply_move(move, team), team.opponent), depth - 1, team.opponent)
        for move in children
    ]
    return max(scores) if team is Team.BOSS else min(scores)


class TestSearchEvaluate:
    """Tests for searched scores."""

    def test_depth_zero_is_static(self, search, small_battle):
        """No recursion happens at depth 0."""
        assert search.evaluate(small_battle, 0) == search.evaluator.evaluate(small_battle)

    @pytest.mark.parametrize("depth", [1, 2, 3])
    def test_pruning_matches_plain_minimax(self, search, small_battle, depth):
        """Alpha-beta returns the same root score as full minimax."""
        expected = plain_minimax(search, small_battle, depth, Team.BOSS)
        assert search.evaluate(small_battle, depth) == pytest.approx(expected)

    def test_player_to_move(self, search, small_battle):
        """The root side can be the player."""
        state = begin_phase(small_battle, Team.PLAYER)
        expected = plain_minimax(search, state, 2, Team.PLAYER)
        assert search.evaluate(state, 2, Team.PLAYER) == pytest.approx(expected)

    def test_state_not_mutated(self, search, small_battle):
        """The root snapshot is equal before and after searching."""
        before = replace(small_battle)
        search.evaluate(small_battle, 3)
        assert small_battle == before

    def test_terminal_when_nobody_can_move(self, search, empty_state):
        """An empty board is scored statically at any depth."""
        assert search.evaluate(empty_state, 3) == search.evaluator.evaluate(empty_state)

    def test_stats_cover_every_ply(self, search, small_battle):
        """Per-depth counters add up to the node count."""
        search.evaluate(small_battle, 2)
        assert len(search.stats.nodes_per_depth) == 3
        assert search.stats.nodes_visited == sum(search.stats.nodes_per_depth)
        assert search.stats.nodes_per_depth[0] == 1

    def test_depth_clamped(self):
        """Depths beyond the table size are clamped."""
        assert MinimaxSearch._clamp_depth(MAX_SUPPORTED_DEPTH + 8) == MAX_SUPPORTED_DEPTH
        assert MinimaxSearch._clamp_depth(3) == 3


class TestFindBestMove:
    """Tests for the auto-move root search."""

    def test_takes_winning_move(self, search, make_unit):
        """A move that kills the player beats passing."""
        state = GameState(rows=4, columns=4, player_hp=1, units=(
            make_unit(0, Team.BOSS, 1, 1, damage=1, moves_left=1),
        ))
        move = search.find_best_move(state, 1)
        assert move == Move(0, 0, 1)

    def test_winning_line_scores_high(self, search, make_unit):
        """The searched score of a forced win includes the win bonus."""
        state = GameState(rows=4, columns=4, player_hp=1, units=(
            make_unit(0, Team.BOSS, 1, 1, damage=1, moves_left=1),
        ))
        assert search.evaluate(state, 1) >= WINNING_SCORE

    def test_none_without_boss_moves(self, search, small_battle):
        """Nothing to do when no boss unit can move."""
        assert search.find_best_move(begin_phase(small_battle, Team.PLAYER), 2) is None

    def test_none_at_depth_zero(self, search, small_battle):
        """Depth 0 never picks a move."""
        assert search.find_best_move(small_battle, 0) is None

    def test_returns_legal_move_or_pass(self, search, small_battle):
        """The chosen move is one the generator offered, or a pass."""
        move = search.find_best_move(small_battle, 2)
        legal = search.move_generator.generate(small_battle, Team.BOSS)
        assert move.is_pass or move in legal


class TestMoveOrdering:
    """Tests for killer slots, history and ordering keys."""

    def test_pass_ordered_last(self, search):
        """A pass always sorts below real moves."""
        assert search.order_score(Move.pass_(), 0) == float("-inf")

    def test_capture_beats_quiet(self, search):
        """Captures get the capture bonus."""
        quiet = Move(0, 1, 1, forward_delta=1, heuristic_delta=0.1)
        capture = Move(0, 1, 2, is_capture=True, forward_delta=1, heuristic_delta=2.1)
        assert search.order_score(capture, 0) > search.order_score(quiet, 0)

    def test_killer_beats_capture(self, search):
        """A primary killer outranks any capture."""
        killer = Move(0, 2, 2)
        capture = Move(1, 1, 2, is_capture=True, heuristic_delta=5.0)
        search._register_killer(killer, 1.0, 0)
        assert search.order_score(killer, 0) > search.order_score(capture, 0)

    def test_killer_slots(self, search):
        """Better cutoffs take slot 1 and push the old move to slot 2."""
        a, b, c = Move(0, 1, 1), Move(1, 2, 2), Move(2, 3, 3)

        search._register_killer(a, 5.0, 0)
        assert search.killers[0] == [(a, 5.0), None]

        search._register_killer(b, 3.0, 0)
        assert search.killers[0] == [(a, 5.0), (b, 3.0)]

        search._register_killer(c, 10.0, 0)
        assert search.killers[0] == [(c, 10.0), (a, 5.0)]

    def test_killer_not_duplicated(self, search):
        """Re-registering slot 1 only refreshes its strength."""
        a, b = Move(0, 1, 1), Move(1, 2, 2)
        search._register_killer(a, 5.0, 0)
        search._register_killer(b, 3.0, 0)
        search._register_killer(a, 8.0, 0)
        assert search.killers[0] == [(a, 8.0), (b, 3.0)]

    def test_history_counts_quiet_cutoffs(self, search):
        """Quiet cutoffs add remaining depth squared plus one."""
        quiet = Move(0, 1, 1)
        search._record_cutoff(quiet, 1.0, 0, 2, True, 0)
        assert search.history[quiet] == 5
        assert search.stats.cutoffs == 1

    def test_captures_not_recorded(self, search):
        """Capture cutoffs do not enter killers or history."""
        capture = Move(0, 1, 1, is_capture=True)
        search._record_cutoff(capture, 1.0, 0, 2, True, 3)
        assert capture not in search.history
        assert search.killers[0] == [None, None]
        assert search.stats.child_skips == 3

    def test_tables_reset_per_decision(self, search, small_battle):
        """Killers and history never leak between decisions."""
        stale = Move(9, 9, 9)
        search._register_killer(stale, 100.0, 0)
        search.history[stale] = 50

        search.evaluate(small_battle, 2)

        assert stale not in search.history
        assert all(slot is None or slot[0] != stale for slots in search.killers for slot in slots)

    def test_custom_weights(self):
        """Ordering weights are injected, not hard-coded."""
        search = MinimaxSearch(ordering=MoveOrderingWeights(capture=0, heuristic_delta_multiplier=0.0))
        capture = Move(0, 1, 2, is_capture=True, heuristic_delta=3.0)
        assert search.order_score(capture, 0) == 0.0
