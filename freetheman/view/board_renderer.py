"""
Board / tahta çizimi.
GameController.GameViewState'i okur; çekirdek nesnelerine dokunmaz.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

import pygame

from controller.game_controller import GameController

Color = tuple[int, int, int]


class BoardRenderer:
    def __init__(self, tile_size: int = 64, palette: Optional["BoardRenderer.Palette"] = None) -> None:
        self.tile_size = tile_size
        self._palette = palette or BoardRenderer.Palette.default()
        self._font = pygame.font.Font(None, max(16, tile_size // 3))

    @dataclass(frozen=True)
    class Palette:
        tiles: dict[str, Color]
        cell_background: Color
        ice: Color
        lock: Color
        character: Color
        selection: Color
        highlight: Color
        hint: Color

        @staticmethod
        def default() -> "BoardRenderer.Palette":
            return BoardRenderer.Palette(
                tiles={
                    "red": (220, 60, 60),
                    "blue": (60, 110, 230),
                    "green": (60, 190, 90),
                    "yellow": (235, 210, 60),
                    "purple": (160, 80, 210),
                    "empty": (28, 30, 44),
                    "stone": (100, 100, 110),
                    "ice": (170, 220, 245),
                    "locked": (120, 90, 60),
                    "exit": (250, 250, 250),
                },
                cell_background=(28, 30, 44),
                ice=(200, 240, 255),
                lock=(60, 40, 20),
                character=(255, 150, 40),
                selection=(255, 255, 255),
                highlight=(255, 255, 180),
                hint=(120, 255, 200),
            )

    def cell_rect(self, x: int, y: int, offset: tuple[int, int]) -> pygame.Rect:
        return pygame.Rect(
            offset[0] + x * self.tile_size,
            offset[1] + y * self.tile_size,
            self.tile_size,
            self.tile_size,
        )

    def cell_at(
        self, pixel: tuple[int, int], state: GameController.GameViewState, offset: tuple[int, int]
    ) -> Optional[tuple[int, int]]:
        """Ekran koordinatını hücre koordinatına çevirir; tahta dışıysa None."""
        px, py = pixel[0] - offset[0], pixel[1] - offset[1]
        if px < 0 or py < 0:
            return None
        x, y = px // self.tile_size, py // self.tile_size
        if x >= state.width or y >= state.height:
            return None
        return (x, y)

    def draw(
        self,
        surface: pygame.Surface,
        state: GameController.GameViewState,
        offset: tuple[int, int] = (0, 0),
        selected: Optional[tuple[int, int]] = None,
        highlights: Iterable[tuple[int, int]] = (),
        hint: Optional[tuple[tuple[int, int], tuple[int, int]]] = None,
    ) -> None:
        palette = self._palette
        for cell in state.cells:
            rect = self.cell_rect(cell.x, cell.y, offset)
            pygame.draw.rect(surface, palette.cell_background, rect)
            inner = rect.inflate(-6, -6)
            color = palette.tiles.get(cell.kind, palette.cell_background)
            if cell.kind == "exit":
                pygame.draw.rect(surface, color, inner, 3, border_radius=6)
            elif cell.kind != "empty":
                pygame.draw.rect(surface, color, inner, border_radius=10)

            if cell.ice_layers:
                pygame.draw.rect(surface, palette.ice, inner, 2 + cell.ice_layers, border_radius=10)
            if cell.locked:
                pygame.draw.line(surface, palette.lock, inner.topleft, inner.bottomright, 3)
                pygame.draw.line(surface, palette.lock, inner.topright, inner.bottomleft, 3)
            if cell.special:
                self._draw_special(surface, inner, cell.special)

        for position in highlights:
            pygame.draw.rect(surface, palette.highlight, self.cell_rect(*position, offset), 3)

        if hint:
            for position in hint:
                pygame.draw.rect(surface, palette.hint, self.cell_rect(*position, offset), 3)

        if selected:
            pygame.draw.rect(surface, palette.selection, self.cell_rect(*selected, offset), 4)

        character_rect = self.cell_rect(*state.character, offset)
        pygame.draw.circle(
            surface, palette.character, character_rect.center, self.tile_size // 3
        )

    def _draw_special(self, surface: pygame.Surface, rect: pygame.Rect, special: str) -> None:
        label = {"line-h": "-", "line-v": "|", "bomb": "B"}.get(special, "?")
        text = self._font.render(label, True, (20, 20, 20))
        surface.blit(text, text.get_rect(center=rect.center))
