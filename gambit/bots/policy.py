"""
Target Policy - Interface for boss card targeting.

A TargetSelector takes a card and returns a TargetResult.
Results include:
- The chosen live target (tile or unit)
- Why the selection failed, as a message and an error code
- How the decision was reached (candidates, scores, search or random)

Failing to find a target is a normal outcome, never an exception: the
caller treats it as "do nothing with this card".
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any


class TargetErrorCode(str, Enum):
    """Why a target could not be chosen."""
    INVALID_INPUT = "invalid_input"
    NO_VALID_TARGET = "no_valid_target"
    NOT_BENEFICIAL = "not_beneficial"
    ID_MAPPING = "id_mapping"
    UNSUPPORTED_CARD = "unsupported_card"


class DecisionMethod(str, Enum):
    """How a successful target was picked."""
    ONLY_CANDIDATE = "only_candidate"
    SEARCH = "search"
    RANDOM = "random"


class CardKind(str, Enum):
    UNIT = "unit"
    ACTION = "action"


class ActionCategory(str, Enum):
    """What an action card does when played."""
    BUFF = "buff"
    TILE = "tile"
    PLAYER = "player"


@dataclass
class TargetResult:
    """
    Result of a target selection.

    Contains:
    - success flag and the chosen live target
    - error message and code on failure
    - search details (for debugging)
    """
    success: bool
    target: Any = None
    error: str | None = None
    error_code: TargetErrorCode | None = None

    method: DecisionMethod | None = None
    evaluated_candidates: int = 0
    best_score: float | None = None
    current_score: float | None = None

    @classmethod
    def failure(cls, error: str, error_code: TargetErrorCode, **details) -> TargetResult:
        """Create a failed result."""
        return cls(success=False, error=error, error_code=error_code, **details)

    @classmethod
    def success_with_target(cls, target: Any, method: DecisionMethod, **details) -> TargetResult:
        """Create a successful result."""
        return cls(success=True, target=target, method=method, **details)

    @property
    def declined(self) -> bool:
        """True when the AI chose not to act because no target helped."""
        return self.error_code is TargetErrorCode.NOT_BENEFICIAL


class TargetSelector(ABC):
    """
    Abstract base class for card target selectors.

    A selector defines how the boss picks a target for one kind of card.
    """

    @abstractmethod
    def select(self, card) -> TargetResult:
        """
        Select a target for the card.

        Args:
            card: The card being played

        Returns:
            TargetResult with the chosen live target
        """
        pass

    def get_name(self) -> str:
        """Get the selector's name/identifier."""
        return self.__class__.__name__
