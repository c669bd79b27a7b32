"""
Level Validator: level ayarlarını yükleme anında doğrular.
Hatalı level oyuna hiç girmez; ilk hatada LevelConfigError fırlatılır.
"""
from __future__ import annotations

from typing import Sequence

from model.exceptions import LevelConfigError
from model.level import BlockerType, LevelDefinition
from model.tile import TileType

MIN_PALETTE_SIZE = 3


class LevelValidator:
    """Level doğrulama kuralları (Single Responsibility)."""

    def __init__(self, allowed_colors: Sequence[str] | None = None, min_match: int = 3) -> None:
        """
        Args:
            allowed_colors: İzin verilen renkler (None = tüm eşleşebilir renkler)
            min_match: Engellerin kendi aralarında oluşturamayacağı seri uzunluğu
        """
        self._min_match = min_match
        self._allowed = (
            {color.lower() for color in allowed_colors}
            if allowed_colors is not None
            else {kind.value for kind in TileType if kind.is_color}
        )

    def validate(self, level: LevelDefinition) -> LevelDefinition:
        """
        Level'i doğrular ve aynen geri döndürür.

        Raises:
            LevelConfigError: Kurallardan biri ihlal edildiyse
        """
        prefix = f"Level {level.id}"
        if level.width <= 0 or level.height <= 0:
            raise LevelConfigError(f"{prefix}: boyutlar pozitif olmalı ({level.width}x{level.height})")
        if level.max_moves <= 0:
            raise LevelConfigError(f"{prefix}: maxMoves pozitif olmalı ({level.max_moves})")

        self._validate_palette(prefix, level.palette)

        if not self._in_bounds(level, level.character_start):
            raise LevelConfigError(f"{prefix}: karakter başlangıcı grid dışında {level.character_start}")
        if not self._in_bounds(level, level.exit_position):
            raise LevelConfigError(f"{prefix}: exit grid dışında {level.exit_position}")
        if level.character_start == level.exit_position:
            raise LevelConfigError(f"{prefix}: karakter exit üzerinde başlayamaz")
        if level.character_start[1] < level.exit_row:
            raise LevelConfigError(f"{prefix}: karakter exit satırının üstünde başlayamaz")

        seen: set[tuple[int, int]] = set()
        for blocker in level.blockers:
            if not self._in_bounds(level, blocker.position):
                raise LevelConfigError(f"{prefix}: engel grid dışında {blocker.position}")
            if blocker.position in seen:
                raise LevelConfigError(f"{prefix}: aynı hücrede birden fazla engel {blocker.position}")
            seen.add(blocker.position)
            if blocker.position in (level.character_start, level.exit_position):
                raise LevelConfigError(
                    f"{prefix}: engel karakter veya exit ile çakışıyor {blocker.position}"
                )
            if blocker.ice_layer < 0:
                raise LevelConfigError(f"{prefix}: iceLayer negatif olamaz {blocker.position}")
            if blocker.color is not None and blocker.color not in level.palette:
                raise LevelConfigError(f"{prefix}: engel rengi palette'de yok '{blocker.color}'")
            if blocker.type == BlockerType.STONE and blocker.color is not None:
                raise LevelConfigError(f"{prefix}: taş engelin rengi olamaz {blocker.position}")

        self._validate_blocker_runs(prefix, level)
        return level

    def _validate_blocker_runs(self, prefix: str, level: LevelDefinition) -> None:
        """Renkli buz engelleri başlangıçta hazır bir seri oluşturamaz."""
        colors = {
            blocker.position: blocker.color
            for blocker in level.blockers
            if blocker.type == BlockerType.ICE and blocker.color and not blocker.locked
        }
        for (x, y), color in colors.items():
            for dx, dy in ((1, 0), (0, 1)):
                # Sadece serinin ilk hücresinden say
                if colors.get((x - dx, y - dy)) == color:
                    continue
                length = 1
                while colors.get((x + dx * length, y + dy * length)) == color:
                    length += 1
                if length >= self._min_match:
                    raise LevelConfigError(
                        f"{prefix}: renkli engeller başlangıçta seri oluşturuyor {(x, y)} ({color})"
                    )

    def _validate_palette(self, prefix: str, palette: Sequence[str]) -> None:
        if len(palette) < MIN_PALETTE_SIZE:
            raise LevelConfigError(f"{prefix}: palette en az {MIN_PALETTE_SIZE} renk içermeli")
        if len(set(palette)) != len(palette):
            raise LevelConfigError(f"{prefix}: palette tekrar eden renk içeriyor")
        unknown = [color for color in palette if color not in self._allowed]
        if unknown:
            raise LevelConfigError(f"{prefix}: bilinmeyen renk(ler) {unknown}")

    @staticmethod
    def _in_bounds(level: LevelDefinition, position: tuple[int, int]) -> bool:
        x, y = position
        return 0 <= x < level.width and 0 <= y < level.height
