"""
Movement Rules - Data-driven piece movement.

A piece's movement is a list of rules. Each rule is a direction offset
written from the player's point of view (+Y is forward), a maximum
number of steps, and flags for jumping, moving into empty tiles and
capturing. The resolver mirrors the Y component for the boss side.

The standard library below builds the five archetypes used by the game:
- A: pawn (one step forward, captures on the forward diagonals)
- B: knight (L-shaped jumps)
- C: bishop (diagonal slides)
- D: rook (orthogonal slides)
- E: queen (diagonal and orthogonal slides)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Longest slide on any supported board
MAX_SLIDE_DISTANCE = 8


@dataclass(frozen=True)
class MovementRule:
    """
    One movement rule.

    dx is the column offset, dy the row offset (forward for the player).
    Slides walk up to max_steps tiles along (dx, dy); jumps land exactly
    on origin + (dx, dy) and ignore everything in between.
    """
    dx: int
    dy: int
    max_steps: int = 1
    is_jump: bool = False
    can_move_to_empty: bool = True
    can_capture: bool = True

    def __post_init__(self):
        if self.max_steps < 1:
            logger.warning(
                "Movement rule (%d, %d) has max_steps=%d; clamping to 1",
                self.dx, self.dy, self.max_steps,
            )
            object.__setattr__(self, "max_steps", 1)


@dataclass(frozen=True)
class MovementDefinition:
    """A named, ordered set of movement rules shared by one archetype."""
    name: str
    rules: tuple[MovementRule, ...] = field(default_factory=tuple)

    def __post_init__(self):
        rules = tuple(self.rules)
        valid = tuple(rule for rule in rules if rule is not None)
        if len(valid) != len(rules):
            logger.warning("Movement definition %r contains empty rules; skipping them", self.name)
        object.__setattr__(self, "rules", valid)


# ============================================================================
# Standard archetypes
# ============================================================================

_DIAGONALS = ((1, 1), (-1, 1), (1, -1), (-1, -1))
_ORTHOGONALS = ((0, 1), (0, -1), (1, 0), (-1, 0))
_KNIGHT_JUMPS = (
    (1, 2), (-1, 2), (1, -2), (-1, -2),
    (2, 1), (-2, 1), (2, -1), (-2, -1),
)


def _slides(directions) -> tuple[MovementRule, ...]:
    return tuple(
        MovementRule(dx, dy, max_steps=MAX_SLIDE_DISTANCE)
        for dx, dy in directions
    )


PAWN = MovementDefinition(
    name="pawn",
    rules=(
        MovementRule(0, 1, can_capture=False),
        MovementRule(1, 1, can_move_to_empty=False),
        MovementRule(-1, 1, can_move_to_empty=False),
    ),
)

KNIGHT = MovementDefinition(
    name="knight",
    rules=tuple(MovementRule(dx, dy, is_jump=True) for dx, dy in _KNIGHT_JUMPS),
)

BISHOP = MovementDefinition(name="bishop", rules=_slides(_DIAGONALS))

ROOK = MovementDefinition(name="rook", rules=_slides(_ORTHOGONALS))

QUEEN = MovementDefinition(name="queen", rules=_slides(_DIAGONALS + _ORTHOGONALS))


STANDARD_DEFINITIONS: dict[str, MovementDefinition] = {
    "A": PAWN,
    "B": KNIGHT,
    "C": BISHOP,
    "D": ROOK,
    "E": QUEEN,
}


def standard_definition(unit_type: str) -> MovementDefinition:
    """Get the movement definition for a unit type, defaulting to the pawn."""
    definition = STANDARD_DEFINITIONS.get(unit_type)
    if definition is None:
        logger.debug("Unknown unit type %r; using pawn movement", unit_type)
        return PAWN
    return definition
