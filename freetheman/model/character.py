from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Tuple


@dataclass
class Character:
    """Kapana kısılmış ve çıkışa ulaşması gereken kişi."""

    x: int
    y: int
    start_x: int = field(init=False)
    start_y: int = field(init=False)
    escaped: bool = False

    def __post_init__(self) -> None:
        self.start_x = self.x
        self.start_y = self.y

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def move_to(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def position_above(self) -> Tuple[int, int]:
        return (self.x, self.y - 1)

    def can_move_up(self, is_passable: Callable[[int, int], bool]) -> bool:
        # Yukarı hareket = y azalır
        return self.y > 0 and is_passable(self.x, self.y - 1)

    def has_reached_exit(self, exit_y: int) -> bool:
        return self.y <= exit_y

    def escape(self) -> None:
        self.escaped = True

    def reset(self) -> None:
        self.x = self.start_x
        self.y = self.start_y
        self.escaped = False

    def __str__(self) -> str:
        return f"Character @ ({self.x}, {self.y}) - Escaped: {self.escaped}"
