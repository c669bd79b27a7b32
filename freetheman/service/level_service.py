"""
Level Service: Level sıralaması, seçimi ve ilerleme.
Repository katmanını kullanarak level verilerini sağlar.
"""
from __future__ import annotations

import logging
from typing import Optional

from model.level import LevelDefinition
from repository.level_repository_json import LevelRepositoryJSON

logger = logging.getLogger(__name__)


class LevelService:
    """Level yönetimi (yükleme, listeleme, ilerleme)."""

    def __init__(self, repository: Optional[LevelRepositoryJSON] = None) -> None:
        self._repository = repository or LevelRepositoryJSON()
        self._levels: dict[int, LevelDefinition] = {}
        self._level_order: list[int] = []
        self._current_level_id: Optional[int] = None

    def _ensure_levels_loaded(self) -> None:
        """Level listesini yükler (cache yapılı)."""
        if self._level_order:
            return
        definitions = list(self._repository.find_all())
        self._level_order = [definition.id for definition in definitions]
        self._levels = {definition.id: definition for definition in definitions}

    def load_level(self, level_id: int) -> LevelDefinition:
        """
        Level'i ID'ye göre yükler.

        Args:
            level_id: Yüklenecek level ID'si

        Returns:
            LevelDefinition: Yüklenen level ayarları

        Raises:
            ValueError: Level bulunamadıysa
        """
        self._ensure_levels_loaded()
        level = self._levels.get(level_id)
        if level is None:
            raise ValueError(f"Level '{level_id}' bulunamadı")
        self._current_level_id = level_id
        logger.info(f"Level {level_id} ({level.name}) seçildi")
        return level

    def get_current_level_id(self) -> Optional[int]:
        return self._current_level_id

    def list_all_levels(self) -> list[int]:
        """Tüm level ID'lerini sırasıyla döndürür."""
        self._ensure_levels_loaded()
        return self._level_order.copy()

    def get_level_count(self) -> int:
        self._ensure_levels_loaded()
        return len(self._level_order)

    def get_first_level_id(self) -> Optional[int]:
        self._ensure_levels_loaded()
        return self._level_order[0] if self._level_order else None

    def get_next_level_id(self) -> Optional[int]:
        """Mevcut level'den sonraki level ID'sini döndürür."""
        index = self.get_current_level_index()
        if index is None or index >= len(self._level_order):
            return None
        return self._level_order[index]

    def get_current_level_index(self) -> Optional[int]:
        """Şu an yüklenmiş level'in sıra numarasını döndürür (1-indexed)."""
        if self._current_level_id is None:
            return None
        self._ensure_levels_loaded()
        try:
            return self._level_order.index(self._current_level_id) + 1
        except ValueError:
            return None

    def level_exists(self, level_id: int) -> bool:
        self._ensure_levels_loaded()
        return level_id in self._levels

    def has_next_level(self) -> bool:
        return self.get_next_level_id() is not None
