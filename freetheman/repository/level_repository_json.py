"""
Level Repository: Level verilerini JSON dosyasından yükleyen repository.
Repository Pattern: Veri erişim katmanını oyun mantığından ayırır.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Optional

from model.exceptions import LevelConfigError
from model.level import LevelDefinition
from service.level_validator import LevelValidator

logger = logging.getLogger(__name__)

DEFAULT_LEVELS_PATH = Path(__file__).parent.parent / "data" / "levels.json"


class LevelRepositoryJSON:
    """
    JSON dosyasından level verilerini okur ve doğrular.
    Dosya bir level listesi ya da {"levels": [...]} nesnesi olabilir.
    """

    def __init__(
        self,
        json_path: str | Path | None = None,
        validator: Optional[LevelValidator] = None,
        default_max_moves: int = 20,
    ) -> None:
        """
        Args:
            json_path: JSON dosyasının yolu (None ise paketteki data/levels.json)
            validator: Level doğrulayıcı
            default_max_moves: maxMoves verilmeyen levellar için
        """
        self._json_path = Path(json_path) if json_path is not None else DEFAULT_LEVELS_PATH
        self._validator = validator or LevelValidator()
        self._default_max_moves = default_max_moves
        self._cache: dict[int, LevelDefinition] | None = None

    @property
    def path(self) -> Path:
        return self._json_path

    def find_by_id(self, level_id: int) -> Optional[LevelDefinition]:
        """ID'ye göre level bulur"""
        return self._load_all().get(level_id)

    def find_all(self) -> Iterable[LevelDefinition]:
        """Tüm levelları ID sırasıyla getirir"""
        definitions = self._load_all()
        for key in sorted(definitions):
            yield definitions[key]

    def reload(self) -> None:
        """Cache'i temizler; sonraki erişimde dosya yeniden okunur."""
        self._cache = None

    def _load_all(self) -> dict[int, LevelDefinition]:
        """Tüm levelları JSON dosyasından yükler (cache'lenmiş)"""
        if self._cache is not None:
            return self._cache

        try:
            with open(self._json_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            logger.error(f"Level dosyası bulunamadı: {self._json_path}")
            raise LevelConfigError(f"Level dosyası bulunamadı: {self._json_path}") from e
        except json.JSONDecodeError as e:
            logger.error(f"Level JSON dosyası okunamadı: {e}")
            raise LevelConfigError(f"Geçersiz level JSON'u ({self._json_path}): {e}") from e

        definitions: dict[int, LevelDefinition] = {}
        for item in self._level_items(data):
            definition = self._map_dict_to_definition(item)
            if definition.id in definitions:
                raise LevelConfigError(f"Tekrar eden level id: {definition.id}")
            definitions[definition.id] = definition

        logger.info(f"{len(definitions)} level yüklendi ({self._json_path.name})")
        self._cache = definitions
        return definitions

    @staticmethod
    def _level_items(data: object) -> list[dict]:
        if isinstance(data, dict):
            data = data.get("levels")
        if not isinstance(data, list):
            raise LevelConfigError("Level dosyası bir level listesi içermeli")
        for item in data:
            if not isinstance(item, dict):
                raise LevelConfigError(f"Level kaydı bir nesne olmalı: {item!r}")
        return data

    def _map_dict_to_definition(self, data: dict) -> LevelDefinition:
        """JSON dict'ini doğrulanmış LevelDefinition'a dönüştürür"""
        try:
            definition = LevelDefinition.from_dict(data, default_max_moves=self._default_max_moves)
        except (KeyError, TypeError, ValueError) as e:
            raise LevelConfigError(f"Level kaydı okunamadı ({data.get('id', '?')}): {e}") from e
        return self._validator.validate(definition)
