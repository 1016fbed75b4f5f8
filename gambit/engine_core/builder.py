"""
State Builder - Snapshots the live game for one AI decision.

The builder reads the live board, the unit roster and the player through
the small protocols below; it never mutates them. Living units that stand
on a tile get ids 0..n-1 in roster order, and the returned mapping turns
an id from the winning snapshot back into the live unit.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol

from .stat_layers import StatLayer
from .state import (
    DurationType,
    GameState,
    Team,
    TileEffectSnapshot,
    UnitEffectSnapshot,
    UnitSnapshot,
)

logger = logging.getLogger(__name__)


class LiveTileEffect(Protocol):
    duration_type: DurationType
    remaining_duration: int
    occupies_tile: bool


class LiveUnitEffect(Protocol):
    duration_type: DurationType
    remaining_duration: int
    can_be_attacked: bool
    stat_layer: StatLayer | None
    thorns_reflection: float


class LiveUnit(Protocol):
    team: Team
    unit_type: str
    row: int | None
    column: int | None
    health: int
    damage: int
    lifetime: int
    worth: int
    remaining_moves: int
    active_effects: list[LiveUnitEffect]

    @property
    def is_alive(self) -> bool: ...


class LiveBoard(Protocol):
    rows: int
    columns: int

    def tile_effects_at(self, row: int, column: int) -> Iterable[LiveTileEffect] | None: ...


class UnitRoster(Protocol):
    @property
    def all_units(self) -> list[LiveUnit]: ...


class PlayerView(Protocol):
    current_hp: int


@dataclass
class BuiltState:
    """A root snapshot plus the way back to live units."""
    state: GameState
    id_to_unit: dict[int, Any] = field(default_factory=dict)

    def live_unit(self, unit_id: int):
        """Live unit for a snapshot id, or None if the id is unknown."""
        return self.id_to_unit.get(unit_id)


class StateBuilder:
    """Builds root snapshots from injected live collaborators."""

    def __init__(self, board: LiveBoard, roster: UnitRoster, player: PlayerView):
        self.board = board
        self.roster = roster
        self.player = player

    def build(self) -> BuiltState | None:
        """
        Snapshot the live game.

        Returns None if a collaborator is missing or the board has no tiles.
        """
        if self.board is None or self.roster is None or self.player is None:
            logger.warning("State builder is missing a collaborator; cannot build a snapshot")
            return None

        rows, columns = self.board.rows, self.board.columns
        if rows <= 0 or columns <= 0:
            logger.warning("Board has invalid dimensions %dx%d", rows, columns)
            return None

        tile_effects = []
        for row in range(rows):
            for column in range(columns):
                live_effects = self.board.tile_effects_at(row, column)
                if live_effects is None:
                    logger.warning("Missing tile at (%d, %d) while building snapshot", row, column)
                    tile_effects.append(())
                    continue
                tile_effects.append(tuple(snapshot_tile_effect(e) for e in live_effects))

        units = []
        id_to_unit = {}
        for live in self.roster.all_units:
            if live is None or not live.is_alive or live.row is None or live.column is None:
                continue
            unit_id = len(units)
            units.append(self._snapshot_unit(unit_id, live))
            id_to_unit[unit_id] = live

        state = GameState(
            rows=rows,
            columns=columns,
            player_hp=self.player.current_hp,
            units=tuple(units),
            tile_effects=tuple(tile_effects),
        )
        return BuiltState(state=state, id_to_unit=id_to_unit)

    def _snapshot_unit(self, unit_id: int, live: LiveUnit) -> UnitSnapshot:
        return UnitSnapshot(
            id=unit_id,
            team=live.team,
            unit_type=live.unit_type,
            row=live.row,
            column=live.column,
            health=live.health,
            damage=live.damage,
            lifetime=live.lifetime,
            worth=live.worth,
            moves_left=live.remaining_moves,
            effects=tuple(snapshot_unit_effect(e) for e in live.active_effects),
        )


def _remaining(duration_type: DurationType, remaining: int) -> int:
    return remaining if duration_type is DurationType.TEMPORARY else -1


def snapshot_unit_effect(effect: LiveUnitEffect) -> UnitEffectSnapshot:
    """Freeze a live unit effect."""
    return UnitEffectSnapshot(
        duration_type=effect.duration_type,
        remaining_duration=_remaining(effect.duration_type, effect.remaining_duration),
        can_be_attacked=effect.can_be_attacked,
        stat_layer=effect.stat_layer,
        thorns_reflection=effect.thorns_reflection,
    )


def snapshot_tile_effect(effect: LiveTileEffect) -> TileEffectSnapshot:
    """Freeze a live tile effect."""
    return TileEffectSnapshot(
        duration_type=effect.duration_type,
        remaining_duration=_remaining(effect.duration_type, effect.remaining_duration),
        occupies_tile=effect.occupies_tile,
    )
