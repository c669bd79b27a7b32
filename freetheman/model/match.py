"""
Eşleşme sonuçları: her cascade turunda grid'den yeniden hesaplanır, saklanmaz.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

from model.tile import SpecialPower, TileType

Position = Tuple[int, int]


class Orientation(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class Match:
    orientation: Orientation
    color: TileType
    positions: Tuple[Position, ...]

    @property
    def length(self) -> int:
        return len(self.positions)

    @property
    def center(self) -> Position:
        return self.positions[len(self.positions) // 2]


@dataclass(frozen=True)
class SpecialTile:
    """Bir eşleşmeden doğan special tile: hangi güç, nereye, hangi renkte."""

    power: SpecialPower
    position: Position
    color: TileType


@dataclass
class MatchResult:
    cleared_positions: list[Position] = field(default_factory=list)
    special_tiles: list[SpecialTile] = field(default_factory=list)
    ice_damaged: list[Position] = field(default_factory=list)
    unlocked: list[Position] = field(default_factory=list)
    activated_specials: list[Tuple[Position, SpecialPower]] = field(default_factory=list)
