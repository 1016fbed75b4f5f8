"""
Board - Live grid of tiles.

Row 0 is the player's back row; row rows-1 is the boss's.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

from .effects import TileEffect

if TYPE_CHECKING:
    from .units import Unit


@dataclass
class Tile:
    row: int
    column: int
    unit: Unit | None = None
    effects: list[TileEffect] = field(default_factory=list)

    @property
    def is_occupied(self) -> bool:
        """A unit stands here or an effect fills the tile."""
        return self.unit is not None or self.is_blocked

    @property
    def is_blocked(self) -> bool:
        return any(effect.occupies_tile for effect in self.effects)

    def __repr__(self) -> str:
        return f"Tile({self.row}, {self.column})"


class Board:
    """A rows x columns grid of tiles."""

    def __init__(self, rows: int = 4, columns: int = 8):
        if rows <= 0 or columns <= 0:
            raise ValueError(f"Board needs positive dimensions, got {rows}x{columns}")
        self.rows = rows
        self.columns = columns
        self._tiles = [[Tile(r, c) for c in range(columns)] for r in range(rows)]

    def in_bounds(self, row: int, column: int) -> bool:
        return 0 <= row < self.rows and 0 <= column < self.columns

    def tile(self, row: int, column: int) -> Tile | None:
        if not self.in_bounds(row, column):
            return None
        return self._tiles[row][column]

    def tiles(self) -> Iterator[Tile]:
        for row in self._tiles:
            yield from row

    def row_tiles(self, row: int) -> list[Tile]:
        if not 0 <= row < self.rows:
            return []
        return list(self._tiles[row])

    # Views used by the movement resolver and the state builder

    def piece_at(self, row: int, column: int) -> Unit | None:
        tile = self.tile(row, column)
        return tile.unit if tile else None

    def is_tile_blocked(self, row: int, column: int) -> bool:
        tile = self.tile(row, column)
        return tile is not None and tile.is_blocked

    def tile_effects_at(self, row: int, column: int) -> list[TileEffect] | None:
        tile = self.tile(row, column)
        return tile.effects if tile else None
