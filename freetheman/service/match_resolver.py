"""
Match Resolver: eşleşmeleri bulur, special tile üretimini ve temizlemeyi hesaplar.
Durumsuz; her çağrıda Grid'in o anki halinden hesaplar.
"""
from __future__ import annotations

import logging
from collections import deque
from typing import Iterable, Optional

from config.game_config import MatchRules
from model.grid import Grid, Position
from model.match import Match, MatchResult, Orientation, SpecialTile
from model.tile import SpecialPower, TileType

logger = logging.getLogger(__name__)


class MatchResolver:
    """Eşleşme algılama ve special tile mekanikleri."""

    def __init__(self, grid: Grid, rules: Optional[MatchRules] = None) -> None:
        """
        Args:
            grid: Üzerinde çalışılacak grid
            rules: Eşleşme kuralları (None = varsayılan 3 / 4 / 5)
        """
        self._grid = grid
        self._rules = rules or MatchRules()

    def find_all_matches(self) -> list[Match]:
        """
        Tüm satırları sonra tüm sütunları run-length ile tarar.
        Hem yatay hem dikey seride olan bir hücre iki ayrı Match kaydında yer alır.
        """
        matches: list[Match] = []
        for y in range(self._grid.height):
            line = [(x, y) for x in range(self._grid.width)]
            matches.extend(self._scan_line(line, Orientation.HORIZONTAL))
        for x in range(self._grid.width):
            line = [(x, y) for y in range(self._grid.height)]
            matches.extend(self._scan_line(line, Orientation.VERTICAL))
        return matches

    def _scan_line(self, line: list[Position], orientation: Orientation) -> list[Match]:
        found: list[Match] = []
        run: list[Position] = []
        run_kind: Optional[TileType] = None

        # Sondaki None, son seriyi kapatmak için
        for position in line + [None]:
            kind = self._matchable_kind(position) if position else None
            if kind is not None and kind == run_kind:
                run.append(position)
                continue
            if run_kind is not None and len(run) >= self._rules.min_match:
                found.append(Match(orientation=orientation, color=run_kind, positions=tuple(run)))
            run = [position] if kind is not None else []
            run_kind = kind
        return found

    def _matchable_kind(self, position: Position) -> Optional[TileType]:
        tile = self._grid.get_tile(*position)
        if tile is None or not tile.is_matchable():
            return None
        return tile.kind

    @staticmethod
    def get_matched_positions(matches: Iterable[Match]) -> list[Position]:
        """Eşleşmelerdeki tekil pozisyonlar (ilk görülme sırasıyla)."""
        seen: dict[Position, None] = {}
        for match in matches:
            for position in match.positions:
                seen.setdefault(position, None)
        return list(seen)

    def get_special_tile_for_match(self, match: Match) -> Optional[SpecialTile]:
        """
        5+ seri → bomba, 4'lü seri → çizgi special (seriye dik yönde), 3'lü → yok.
        Special serinin ortasındaki hücrede (floor) oluşur.
        """
        if match.length >= self._rules.bomb_count:
            return SpecialTile(SpecialPower.BOMB, match.center, match.color)
        if match.length >= self._rules.line_clear_count:
            # Yatay eşleşme → dikey temizleyen special (ve tersi)
            power = (
                SpecialPower.LINE_VERTICAL
                if match.orientation == Orientation.HORIZONTAL
                else SpecialPower.LINE_HORIZONTAL
            )
            return SpecialTile(power, match.center, match.color)
        return None

    def get_special_tile_affected_positions(
        self, position: Position, power: SpecialPower
    ) -> list[Position]:
        """Special'ın etki alanı; taş, exit ve karakter hücresi asla etkilenmez."""
        x, y = position
        if power == SpecialPower.LINE_HORIZONTAL:
            candidates = [(px, y) for px in range(self._grid.width)]
        elif power == SpecialPower.LINE_VERTICAL:
            candidates = [(x, py) for py in range(self._grid.height)]
        else:
            candidates = [
                (px, py)
                for py in range(y - 1, y + 2)
                for px in range(x - 1, x + 2)
            ]
        return [pos for pos in candidates if self._is_blastable(pos)]

    def _is_blastable(self, position: Position) -> bool:
        tile = self._grid.get_tile(*position)
        if tile is None:
            return False
        if position == self._grid.character_position:
            return False
        return not (tile.is_blocker() or tile.is_exit())

    def process_matches(self, matches: list[Match]) -> MatchResult:
        """
        Eşleşen hücreleri işler (grid'i boşaltmaz, sadece karar verir).

        - Special'lar her eşleşme için bir kez, tekilleştirmeden önce türetilir.
        - Buzlu tile: bir katman azalır; katman kaldıysa bu tur temizlenmez.
        - Diğerleri: komşu kilitler açılır, hücre temizlenir.
        - Temizlenen hücrede special varsa etki alanı da temizlenir (zincirleme).
        """
        result = MatchResult()
        for match in matches:
            special = self.get_special_tile_for_match(match)
            if special:
                result.special_tiles.append(special)

        processed: set[Position] = set()
        queue: deque[Position] = deque(self.get_matched_positions(matches))
        while queue:
            position = queue.popleft()
            if position in processed:
                continue
            processed.add(position)
            self._hit(position, result, queue)
        return result

    def _hit(self, position: Position, result: MatchResult, queue: deque[Position]) -> None:
        tile = self._grid.get_tile(*position)
        if tile is None or tile.is_empty() or position in result.cleared_positions:
            return

        if tile.ice_layers > 0:
            tile.remove_ice_layer()
            result.ice_damaged.append(position)
            # Son katman eriyene kadar hücre temizlenmez
            if tile.ice_layers > 0:
                return

        result.unlocked.extend(self.unlock_adjacent_tiles(position, result))
        result.cleared_positions.append(position)

        if tile.special is not None:
            result.activated_specials.append((position, tile.special))
            logger.debug("Special %s activated at %s", tile.special.value, position)
            queue.extend(self.get_special_tile_affected_positions(position, tile.special))

    def unlock_adjacent_tiles(
        self, position: Position, result: Optional[MatchResult] = None
    ) -> list[Position]:
        """
        Komşu kilitli tile'ların kilidini açar. Renksiz kilit kabuğu açılınca
        hücre boşalır ve temizlenenler listesine eklenir.
        """
        unlocked: list[Position] = []
        for neighbour in self._grid.get_adjacent_positions(position):
            tile = self._grid.tile_at(neighbour)
            if not tile.locked or tile.is_blocker():
                continue
            tile.unlock()
            unlocked.append(neighbour)
            if tile.kind == TileType.LOCKED and result is not None:
                if neighbour not in result.cleared_positions:
                    result.cleared_positions.append(neighbour)
        return unlocked

    def has_matches(self) -> bool:
        return len(self.find_all_matches()) > 0

    def check_for_match_at(self, position: Position) -> bool:
        return self._grid.check_for_match_at(position)

    def check_swap_for_matches(self, p1: Position, p2: Position) -> bool:
        return self.check_for_match_at(p1) or self.check_for_match_at(p2)
