"""
Character Controller: kapana kısılan kişinin hareketini ve kaçışını yönetir.
Karakterin gerçek pozisyonu burada tutulur; Grid'deki kopya her adımda
Grid.update_character_position ile güncellenir.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from model.character import Character
from model.exceptions import InvariantViolation
from model.grid import Grid, Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CharacterStep:
    x: int
    from_y: int
    to_y: int


class CharacterController:
    def __init__(self, grid: Grid) -> None:
        self._grid = grid
        self.character: Optional[Character] = None
        self.exit_row = 0

    def initialize(self, start: Position, exit_row: int = 0) -> None:
        """Karakteri başlangıç pozisyonuna koyar ve grid hücresini boşaltır."""
        self.character = Character(*start)
        self.exit_row = exit_row
        self._grid.update_character_position(start, start)

    @property
    def position(self) -> Optional[Position]:
        return self.character.position if self.character else None

    def _require_character(self) -> Character:
        if self.character is None:
            raise RuntimeError("Karakter initialize edilmedi.")
        if self.character.position != self._grid.character_position:
            raise InvariantViolation(
                f"Karakter pozisyonu tutarsız: {self.character.position} != {self._grid.character_position}"
            )
        return self.character

    def _is_passable(self, x: int, y: int) -> bool:
        tile = self._grid.get_tile(x, y)
        return tile is not None and (tile.is_empty() or tile.is_exit())

    def try_move_up(self) -> Optional[CharacterStep]:
        """Üstteki hücre boş veya exit ise bir satır yukarı çıkar."""
        character = self._require_character()
        if not character.can_move_up(self._is_passable):
            return None

        old = character.position
        new = character.position_above()
        character.move_to(*new)
        self._grid.update_character_position(old, new)
        return CharacterStep(x=old[0], from_y=old[1], to_y=new[1])

    def move_to_highest_empty(self) -> list[CharacterStep]:
        """Hareket edemeyene veya exit satırına ulaşana kadar yukarı çıkar."""
        steps: list[CharacterStep] = []
        if self.has_escaped():
            return steps
        step = self.try_move_up()
        while step:
            steps.append(step)
            if self.has_escaped():
                self._require_character().escape()
                logger.info("Character reached exit row %d", self.exit_row)
                break
            step = self.try_move_up()
        return steps

    def has_escaped(self) -> bool:
        if self.character is None:
            return False
        return self.character.has_reached_exit(self.exit_row)

    def reset(self) -> None:
        """
        Karakteri başlangıç pozisyonuna döndürür.
        Başlangıç hücresini dolduran tile, karakterin boşalttığı hücreye geçer.
        """
        character = self._require_character()
        old = character.position
        character.reset()
        start = character.position
        if start == old:
            return
        displaced = self._grid.tile_at(start)
        self._grid.set_empty(*start)
        self._grid.update_character_position(old, start)
        # Exit'ten dönülüyorsa yer değiştirecek hücre yok
        if old != self._grid.exit_position and not displaced.is_empty():
            self._grid.set_tile(old[0], old[1], displaced)

    def is_position_above_character(self, position: Position) -> bool:
        if self.character is None:
            return False
        x, y = position
        return x == self.character.x and y < self.character.y

    def get_path_to_exit(self) -> list[Position]:
        if self.character is None:
            return []
        return [(self.character.x, y) for y in range(self.character.y - 1, self.exit_row - 1, -1)]

    def is_blocked(self) -> bool:
        if self.character is None:
            return True
        if self.character.y <= 0:
            return False
        return not self._is_passable(*self.character.position_above())
