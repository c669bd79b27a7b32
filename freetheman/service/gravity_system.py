"""
Gravity System: eşleşmelerden sonra tile'ların düşmesi ve yeni tile üretimi.
Sabit hücreler (karakter, exit, taş) hiç hareket etmez ve üzerine yazılmaz;
tile'lar bu hücrelerin etrafından düşer.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from model.exceptions import InvariantViolation
from model.grid import Grid, Position
from model.tile import Tile, TileType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FallMovement:
    source: Position
    target: Position


@dataclass(frozen=True)
class SpawnedTile:
    position: Position
    color: TileType


@dataclass
class GravityResult:
    movements: list[FallMovement] = field(default_factory=list)
    spawned: list[SpawnedTile] = field(default_factory=list)


class GravitySystem:
    def __init__(self, grid: Grid, rng: Optional[random.Random] = None) -> None:
        """
        Args:
            grid: Üzerinde çalışılacak grid
            rng: Yeni tile renkleri için üreteç (None = seed'siz)
        """
        self._grid = grid
        self._rng = rng or random.Random()

    def is_position_fixed(self, position: Position) -> bool:
        return self._grid.is_fixed(*position)

    def apply_gravity(self) -> list[FallMovement]:
        """
        Tek geçiş: her sütunda, aşağıdan yukarıya her boş hücre için
        yukarıdaki en yakın düşebilir tile'ı bulup aşağı indirir.
        """
        movements: list[FallMovement] = []
        for x in range(self._grid.width):
            empty_rows = [
                y
                for y in range(self._grid.height - 1, -1, -1)
                if not self._grid.is_fixed(x, y) and self._grid.is_empty(x, y)
            ]
            for empty_y in empty_rows:
                for search_y in range(empty_y - 1, -1, -1):
                    if self._grid.is_fixed(x, search_y):
                        continue
                    tile = self._grid.tile_at((x, search_y))
                    if tile.is_empty() or not tile.is_matchable():
                        continue
                    self._grid.set_tile(x, empty_y, tile)
                    self._grid.set_empty(x, search_y)
                    movements.append(FallMovement(source=(x, search_y), target=(x, empty_y)))
                    break
        return movements

    def apply_gravity_fully(self) -> list[list[FallMovement]]:
        """Hareket kalmayana kadar apply_gravity tekrarlanır (geçiş başına bir liste)."""
        passes: list[list[FallMovement]] = []
        while True:
            movements = self.apply_gravity()
            if not movements:
                return passes
            passes.append(movements)

    def spawn_new_tiles(self) -> list[SpawnedTile]:
        """Kalan boş (sabit olmayan) hücrelere paletten rastgele renk koyar."""
        spawned: list[SpawnedTile] = []
        palette = self._grid.tile_types
        for x in range(self._grid.width):
            for y in range(self._grid.height):
                if self._grid.is_fixed(x, y) or not self._grid.is_empty(x, y):
                    continue
                tile = Tile.random_color(self._rng, palette)
                self._grid.set_tile(x, y, tile)
                spawned.append(SpawnedTile(position=(x, y), color=tile.kind))
        return spawned

    def process_gravity(self) -> GravityResult:
        """Tam sıkıştırma → spawn → tekrar sıkıştırma."""
        exit_before = self._grid.tile_at(self._grid.exit_position).kind
        result = GravityResult()
        for movements in self.apply_gravity_fully():
            result.movements.extend(movements)

        result.spawned = self.spawn_new_tiles()
        if result.spawned:
            for movements in self.apply_gravity_fully():
                result.movements.extend(movements)

        self._assert_settled(exit_before)
        logger.debug(
            "Gravity settled: %d moves, %d spawned", len(result.movements), len(result.spawned)
        )
        return result

    def _assert_settled(self, exit_before: TileType) -> None:
        if self._grid.tile_at(self._grid.exit_position).kind != exit_before:
            raise InvariantViolation("Exit hücresinin üzerine yazıldı")
        if not self._grid.is_empty(*self._grid.character_position) and (
            self._grid.character_position != self._grid.exit_position
        ):
            raise InvariantViolation("Karakter hücresine tile yerleşti")
        leftover = self.get_empty_positions()
        if leftover:
            raise InvariantViolation(f"Yerçekimi sonrası boş hücre kaldı: {leftover}")

    def get_empty_positions(self) -> list[Position]:
        return [
            (x, y)
            for x, y in self._grid.positions()
            if self._grid.is_empty(x, y) and not self._grid.is_fixed(x, y)
        ]
