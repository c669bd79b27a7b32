"""
Game Configuration: Oyunun tüm ayarları tek bir değişmez (immutable) nesnede.
Nesne uygulama başında bir kez oluşturulur ve ihtiyaç duyan bileşenlere
parametre olarak verilir. Hiçbir bileşen global bir sabit tablosu okumaz.
"""
from __future__ import annotations

import os
import random
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Tuple

MATCHABLE_COLORS: Tuple[str, ...] = ("red", "blue", "green", "yellow", "purple")


@dataclass(frozen=True)
class MatchRules:
    """Eşleşme kuralları."""

    min_match: int = 3  # Eşleşme için minimum tile
    line_clear_count: int = 4  # Çizgi temizleyen special için
    bomb_count: int = 5  # Bomba için


@dataclass(frozen=True)
class AnimationTimings:
    """Sunum katmanının animasyon süreleri (saniye). Oyun mantığını etkilemez."""

    swap: float = 0.2
    match: float = 0.3
    fall: float = 0.2
    spawn: float = 0.3
    character_move: float = 0.4
    cascade_delay: float = 0.1


@dataclass(frozen=True)
class GameConfig:
    matchable_colors: Tuple[str, ...] = MATCHABLE_COLORS
    default_max_moves: int = 20
    max_cascade_rounds: int = 500
    seed: Optional[int] = None
    levels_path: Optional[Path] = None
    log_level: str = "INFO"
    match: MatchRules = field(default_factory=MatchRules)
    animation: AnimationTimings = field(default_factory=AnimationTimings)

    def rng(self) -> random.Random:
        """Seed verilmişse deterministik, verilmemişse rastgele bir üreteç döndürür."""
        return random.Random(self.seed)

    def with_seed(self, seed: Optional[int]) -> "GameConfig":
        return replace(self, seed=seed)

    @staticmethod
    def from_env() -> "GameConfig":
        """
        Ortam değişkenlerinden config oluşturur.

        FREETHEMAN_SEED, FREETHEMAN_LEVELS_PATH, FREETHEMAN_LOG_LEVEL,
        FREETHEMAN_MAX_CASCADE_ROUNDS okunur; olmayanlar varsayılan kalır.
        """
        seed_value = os.getenv("FREETHEMAN_SEED")
        levels_path = os.getenv("FREETHEMAN_LEVELS_PATH")
        max_rounds = os.getenv("FREETHEMAN_MAX_CASCADE_ROUNDS")
        return GameConfig(
            seed=int(seed_value) if seed_value else None,
            levels_path=Path(levels_path) if levels_path else None,
            log_level=os.getenv("FREETHEMAN_LOG_LEVEL", "INFO").upper(),
            max_cascade_rounds=int(max_rounds) if max_rounds else 500,
        )
