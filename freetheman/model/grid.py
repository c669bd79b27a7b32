"""
Grid: oyun tahtasının durumu ve tile işlemleri.
Her hücrede initialize sonrası her zaman bir Tile bulunur (None yok).
Karakterin gerçek pozisyonu CharacterController'dadır; buradaki kopya
sadece update_character_position ile senkron tutulur.
"""
from __future__ import annotations

import logging
import random
from typing import Iterator, Optional, Sequence, Tuple

from model.exceptions import InvariantViolation
from model.level import BlockerDefinition, BlockerType, LevelDefinition
from model.tile import Tile, TileSnapshot, TileType

logger = logging.getLogger(__name__)

Position = Tuple[int, int]
GridSnapshot = Tuple[Tuple[TileSnapshot, ...], ...]

# Yukarı, aşağı, sol, sağ
DIRECTIONS: Tuple[Position, ...] = ((0, -1), (0, 1), (-1, 0), (1, 0))


class Grid:
    def __init__(self, width: int, height: int, min_match: int = 3) -> None:
        self.width = width
        self.height = height
        self.min_match = min_match
        self.tile_types: tuple[TileType, ...] = ()
        self.exit_position: Position = (width // 2, 0)
        self.character_position: Position = (width // 2, height - 1)
        self.degenerate_fill = False  # Palet yetmediği için başlangıçta eşleşme kalmış olabilir
        self._cells: list[list[Optional[Tile]]] = [[None] * width for _ in range(height)]

    def initialize(self, level: LevelDefinition, rng: random.Random) -> None:
        """
        Grid'i level ayarlarına göre doldurur.

        Sıra:
        1. Engeller (stone / ice / locked)
        2. Exit
        3. Karakter hücresi (EMPTY)
        4. Kalan hücreler: başlangıçta 3'lü oluşturmayan rastgele renkler
        """
        self.tile_types = tuple(TileType.color(name) for name in level.palette)
        self.exit_position = level.exit_position
        self.character_position = level.character_start
        self.degenerate_fill = False
        self._cells = [[None] * self.width for _ in range(self.height)]

        for blocker in level.blockers:
            self._cells[blocker.y][blocker.x] = self._create_blocker_tile(blocker)

        exit_x, exit_y = level.exit_position
        self._cells[exit_y][exit_x] = Tile(TileType.EXIT)

        start_x, start_y = level.character_start
        self._cells[start_y][start_x] = Tile.empty()

        for y in range(self.height):
            for x in range(self.width):
                if self._cells[y][x] is None:
                    self._cells[y][x] = self._create_non_matching_tile(x, y, rng)

        if self.degenerate_fill:
            logger.warning(
                "Palette of level %s too small to avoid initial matches", level.id
            )

    @staticmethod
    def _create_blocker_tile(blocker: BlockerDefinition) -> Tile:
        if blocker.type == BlockerType.STONE:
            return Tile(TileType.STONE, ice_layers=blocker.ice_layer, locked=blocker.locked)
        kind = TileType.color(blocker.color) if blocker.color else TileType(blocker.type.value)
        if blocker.type == BlockerType.ICE:
            return Tile(kind, ice_layers=max(1, blocker.ice_layer), locked=blocker.locked)
        # LOCKED
        return Tile(kind, ice_layers=blocker.ice_layer, locked=True)

    def _create_non_matching_tile(self, x: int, y: int, rng: random.Random) -> Tile:
        """Yerleşince seri tamamlamayan bir renk seçer; hiç yoksa herhangi bir renk."""
        available = [
            kind for kind in self.tile_types if not self._would_complete_run(x, y, kind)
        ]
        if not available:
            self.degenerate_fill = True
            available = list(self.tile_types)
        return Tile(rng.choice(available))

    def _would_complete_run(self, x: int, y: int, kind: TileType) -> bool:
        for dx, dy in ((1, 0), (0, 1)):
            count = 1 + self._count_same(x, y, dx, dy, kind) + self._count_same(x, y, -dx, -dy, kind)
            if count >= self.min_match:
                return True
        return False

    def _count_same(self, x: int, y: int, dx: int, dy: int, kind: TileType) -> int:
        count = 0
        nx, ny = x + dx, y + dy
        while self.is_valid_position(nx, ny):
            tile = self._cells[ny][nx]
            if tile is None or not tile.is_matchable() or tile.kind != kind:
                break
            count += 1
            nx, ny = nx + dx, ny + dy
        return count

    # Hücre erişimi

    def is_valid_position(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_tile(self, x: int, y: int) -> Optional[Tile]:
        if self.is_valid_position(x, y):
            return self._cells[y][x]
        return None

    def tile_at(self, position: Position) -> Tile:
        """Sınır içindeki bir hücrenin tile'ını döndürür; sınır dışıysa IndexError."""
        x, y = position
        tile = self.get_tile(x, y)
        if tile is None:
            raise IndexError(f"Pozisyon grid dışında: {position}")
        return tile

    def set_tile(self, x: int, y: int, tile: Tile) -> None:
        if not self.is_valid_position(x, y):
            raise IndexError(f"Pozisyon grid dışında: {(x, y)}")
        self._cells[y][x] = tile

    def set_empty(self, x: int, y: int) -> None:
        self.set_tile(x, y, Tile.empty())

    def is_empty(self, x: int, y: int) -> bool:
        tile = self.get_tile(x, y)
        return tile is not None and tile.is_empty()

    def positions(self) -> Iterator[Position]:
        """Tüm hücreler, satır satır (soldan sağa, yukarıdan aşağı)."""
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y)

    def is_fixed(self, x: int, y: int) -> bool:
        """Yerçekimi ve spawn dışı hücre mi? (karakter, exit, taş)"""
        if (x, y) == self.character_position:
            return True
        tile = self.get_tile(x, y)
        return tile is not None and (tile.is_exit() or tile.is_blocker())

    # Takas ve komşuluk

    def swap(self, p1: Position, p2: Position) -> None:
        """İki hücrenin tile'larını koşulsuz değiştirir (komşuluk kontrolü çağırana ait)."""
        tile1 = self.tile_at(p1)
        tile2 = self.tile_at(p2)
        self._cells[p1[1]][p1[0]] = tile2
        self._cells[p2[1]][p2[0]] = tile1

    @staticmethod
    def is_adjacent(p1: Position, p2: Position) -> bool:
        dx = abs(p1[0] - p2[0])
        dy = abs(p1[1] - p2[1])
        return dx + dy == 1

    def get_adjacent_positions(self, position: Position) -> list[Position]:
        x, y = position
        return [
            (x + dx, y + dy)
            for dx, dy in DIRECTIONS
            if self.is_valid_position(x + dx, y + dy)
        ]

    def get_adjacent(self, position: Position) -> list[Tile]:
        return [self.tile_at(pos) for pos in self.get_adjacent_positions(position)]

    # Yerel eşleşme kontrolü

    def check_for_match_at(self, position: Position) -> bool:
        """Pozisyondan sola/sağa ve yukarı/aşağı tarayarak 3'lü seri var mı bakar."""
        tile = self.get_tile(*position)
        if tile is None or not tile.is_matchable():
            return False
        x, y = position
        for dx, dy in ((1, 0), (0, 1)):
            count = 1 + self._count_same(x, y, dx, dy, tile.kind) + self._count_same(x, y, -dx, -dy, tile.kind)
            if count >= self.min_match:
                return True
        return False

    def find_hint(self) -> Optional[Tuple[Position, Position]]:
        """
        Geçerli bir hamle arar: her takaslanabilir tile sağ ve alt komşusuyla
        denenir, ilk bulunan döner (satır satır, önce sağ sonra alt).
        """
        for x, y in self.positions():
            tile = self._cells[y][x]
            if tile is None or not tile.can_swap():
                continue
            for neighbour in ((x + 1, y), (x, y + 1)):
                other = self.get_tile(*neighbour)
                if other is None or not other.can_swap():
                    continue
                self.swap((x, y), neighbour)
                has_match = self.check_for_match_at((x, y)) or self.check_for_match_at(neighbour)
                self.swap((x, y), neighbour)
                if has_match:
                    return ((x, y), neighbour)
        return None

    def has_possible_move(self) -> bool:
        return self.find_hint() is not None

    # Karakter senkronu

    def update_character_position(self, old: Position, new: Position) -> None:
        """
        Karakter pozisyonunun tek güncelleme noktası.
        Eski hücre EMPTY olur (exit ise dokunulmaz); yeni hücre EMPTY veya EXIT olmalı.
        """
        if not self.is_valid_position(*new):
            raise InvariantViolation(f"Karakter grid dışına taşınamaz: {new}")
        target = self.tile_at(new)
        if new != old and not (target.is_empty() or target.is_exit()):
            raise InvariantViolation(f"Karakter dolu hücreye taşınamaz: {new} ({target})")
        if old != self.exit_position:
            self.set_empty(*old)
        self.character_position = new

    # Görüntü / test yardımcıları

    def snapshot(self) -> GridSnapshot:
        return tuple(
            tuple(self.tile_at((x, y)).snapshot() for x in range(self.width))
            for y in range(self.height)
        )

    def kinds(self) -> list[list[TileType]]:
        return [[self.tile_at((x, y)).kind for x in range(self.width)] for y in range(self.height)]

    def to_rows(self) -> list[str]:
        """Debug için metin gösterimi (renklerin ilk harfi, '.' boş, '#' taş, 'X' exit, '@' karakter)."""
        symbols = {
            TileType.EMPTY: ".",
            TileType.STONE: "#",
            TileType.EXIT: "X",
            TileType.ICE: "*",
            TileType.LOCKED: "L",
        }
        rows = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                if (x, y) == self.character_position:
                    row.append("@")
                    continue
                kind = self.tile_at((x, y)).kind
                row.append(symbols.get(kind, kind.value[0].upper()))
            rows.append("".join(row))
        return rows

    @staticmethod
    def palette_from(names: Sequence[str]) -> tuple[TileType, ...]:
        return tuple(TileType.color(name) for name in names)
