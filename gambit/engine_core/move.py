"""
Moves - Candidate actions explored by the search.

A move is identified by its unit and destination. The capture flag and
the two deltas are ordering hints attached by the generator; they do
not take part in equality, so a killer move recorded in one position
still matches the same move generated in a sibling position.
"""

from __future__ import annotations
from dataclasses import dataclass, field

PASS_UNIT_ID = -1


@dataclass(frozen=True)
class Move:
    unit_id: int
    to_row: int
    to_col: int
    is_pass: bool = False

    # Ordering hints
    is_capture: bool = field(default=False, compare=False)
    forward_delta: int = field(default=0, compare=False)
    heuristic_delta: float = field(default=0.0, compare=False)

    @classmethod
    def pass_(cls) -> Move:
        """The "end phase" move."""
        return cls(unit_id=PASS_UNIT_ID, to_row=-1, to_col=-1, is_pass=True)

    def __str__(self) -> str:
        if self.is_pass:
            return "pass"
        tag = "x" if self.is_capture else "->"
        return f"unit {self.unit_id} {tag} ({self.to_row}, {self.to_col})"
