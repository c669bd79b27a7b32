"""
Tile tanımları ve tipleri.
Tile sadece içeriği tutar; koordinat Grid'e, görsel tutamaç view katmanına aittir.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple


class TileType(Enum):
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    PURPLE = "purple"
    EMPTY = "empty"
    STONE = "stone"
    ICE = "ice"
    LOCKED = "locked"
    EXIT = "exit"

    @property
    def is_color(self) -> bool:
        return self in COLOR_TYPES

    @staticmethod
    def color(name: str) -> "TileType":
        """Renk adından TileType döndürür (sadece eşleşebilir renkler)."""
        kind = TileType(name.lower())
        if not kind.is_color:
            raise ValueError(f"'{name}' eşleşebilir bir renk değil")
        return kind


COLOR_TYPES = frozenset(
    {TileType.RED, TileType.BLUE, TileType.GREEN, TileType.YELLOW, TileType.PURPLE}
)


class SpecialPower(Enum):
    LINE_HORIZONTAL = "line-h"  # Satırı temizler
    LINE_VERTICAL = "line-v"  # Sütunu temizler
    BOMB = "bomb"  # 3x3 alanı temizler


TileSnapshot = Tuple[str, int, bool, Optional[str]]


@dataclass
class Tile:
    kind: TileType
    ice_layers: int = 0  # 0 = buz yok
    locked: bool = False
    special: Optional[SpecialPower] = None

    @staticmethod
    def empty() -> "Tile":
        return Tile(TileType.EMPTY)

    @staticmethod
    def random_color(rng: random.Random, palette: Sequence[TileType]) -> "Tile":
        return Tile(rng.choice(list(palette)))

    def is_color(self) -> bool:
        return self.kind.is_color

    def is_matchable(self) -> bool:
        """Bir eşleşme serisine dahil olabilir mi? Kilitli tile'lar seriyi böler."""
        return self.kind.is_color and not self.locked

    def can_swap(self) -> bool:
        """Oyuncu bu tile'ı yer değiştirebilir mi? Buzlu veya kilitli olamaz."""
        return self.is_matchable() and self.ice_layers == 0

    def is_empty(self) -> bool:
        return self.kind == TileType.EMPTY

    def is_blocker(self) -> bool:
        return self.kind == TileType.STONE

    def is_exit(self) -> bool:
        return self.kind == TileType.EXIT

    def is_special(self) -> bool:
        return self.special is not None

    def set_special(self, power: SpecialPower) -> None:
        self.special = power

    def clear_special(self) -> None:
        self.special = None

    def add_ice(self, layers: int = 1) -> None:
        self.ice_layers = max(0, layers)

    def remove_ice_layer(self) -> bool:
        """Bir buz katmanı kaldırır. Buz yoksa False döner."""
        if self.ice_layers > 0:
            self.ice_layers -= 1
            return True
        return False

    def lock(self) -> None:
        self.locked = True

    def unlock(self) -> None:
        self.locked = False

    def clone(self) -> "Tile":
        return Tile(self.kind, self.ice_layers, self.locked, self.special)

    def snapshot(self) -> TileSnapshot:
        return (
            self.kind.value,
            self.ice_layers,
            self.locked,
            self.special.value if self.special else None,
        )

    def __str__(self) -> str:
        return f"Tile({self.kind.value})"
