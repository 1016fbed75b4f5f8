"""
Gambit - Boss AI for a chess-like tactical card game

A deterministic decision engine for the boss side of the board.
The engine snapshots the live game and provides:
- Movement rules per unit archetype
- Weighted board evaluation
- Alpha-beta minimax search with move ordering
- Target selection for boss cards
"""

__version__ = "0.1.0"
