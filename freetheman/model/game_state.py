"""
Hamle yaşam döngüsünün durumları ve hamle bütçesi.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class GameState(Enum):
    IDLE = "idle"
    SWAPPING = "swapping"
    MATCHING = "matching"
    FALLING = "falling"
    CHARACTER_MOVING = "character_moving"
    WIN = "win"
    LOSE = "lose"

    @property
    def is_terminal(self) -> bool:
        return self in (GameState.WIN, GameState.LOSE)


@dataclass
class MoveBudget:
    max_moves: int
    remaining: int = field(init=False)
    moves_used: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.remaining = self.max_moves

    def is_exhausted(self) -> bool:
        return self.remaining <= 0

    def use_move(self) -> bool:
        """Bir hamle harcar. Hamle kalmadıysa False döner."""
        if self.remaining <= 0:
            return False
        self.remaining -= 1
        self.moves_used += 1
        return True

    def add_moves(self, moves: int) -> None:
        """Bonus hamle ekler."""
        self.remaining += max(0, moves)
