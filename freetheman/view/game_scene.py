"""
Oyun sahnesi: tahtayı çizer, fare ile iki komşu hücre seçildiğinde takas ister.
Tuşlar: R yeniden başlat, H ipucu, N sonraki level, SPACE animasyonları atla.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

import pygame

from config.game_config import AnimationTimings
from controller.cascade_orchestrator import RejectReason
from controller.game_controller import GameController
from service.game_event_service import GameEvent, GameEventType
from view.animation_queue import AnimationQueue
from view.board_renderer import BoardRenderer
from view.scene import Scene

logger = logging.getLogger(__name__)

HEADER_HEIGHT = 80


class GameScene(Scene):
    def __init__(
        self,
        controller: GameController,
        timings: Optional[AnimationTimings] = None,
        tile_size: int = 64,
    ) -> None:
        self._controller = controller
        self._renderer = BoardRenderer(tile_size)
        self._animations = AnimationQueue(timings)
        self._controller.event_service.attach(self._animations)
        self._selected: Optional[tuple[int, int]] = None
        self._hint: Optional[tuple[tuple[int, int], tuple[int, int]]] = None
        self._message = ""
        self._state = self._controller.view_state()
        self._header_font = pygame.font.Font(None, 30)
        self._info_font = pygame.font.Font(None, 24)

    def _board_offset(self, surface_size: tuple[int, int]) -> tuple[int, int]:
        board_width = self._state.width * self._renderer.tile_size
        return (max(0, (surface_size[0] - board_width) // 2), HEADER_HEIGHT)

    def handle_events(self, events: Iterable[pygame.event.Event]) -> None:
        for event in events:
            if event.type == pygame.KEYDOWN:
                self._handle_key(event.key)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._handle_click(event.pos)
        self._state = self._controller.view_state()

    def _handle_key(self, key: int) -> None:
        if key == pygame.K_r:
            self._animations.skip_all()
            self._controller.restart_level()
            self._reset_selection("")
        elif key == pygame.K_h:
            self._hint = self._controller.find_hint()
            self._message = "" if self._hint else "Geçerli hamle yok, R ile yeniden başlat"
        elif key == pygame.K_n and self._controller.has_won():
            self._animations.skip_all()
            if self._controller.load_next_level():
                self._reset_selection("")
            else:
                self._message = "Tüm leveller tamamlandı!"
        elif key == pygame.K_SPACE:
            self._animations.skip_all()

    def _handle_click(self, pixel: tuple[int, int]) -> None:
        # Animasyon sürerken girdi alınmaz
        if self._animations.is_busy or self._controller.is_game_over():
            return
        surface = pygame.display.get_surface()
        offset = self._board_offset(surface.get_size() if surface else (0, 0))
        cell = self._renderer.cell_at(pixel, self._state, offset)
        if cell is None:
            self._selected = None
            return
        if self._selected is None:
            self._selected = cell
            return
        if cell == self._selected:
            self._selected = None
            return

        outcome = self._controller.request_swap(self._selected, cell)
        if outcome.accepted:
            self._reset_selection("")
        elif outcome.reason == RejectReason.NOT_ADJACENT:
            self._selected = cell
        else:
            self._selected = None
            logger.debug(f"Takas reddedildi: {outcome.reason}")

    def _reset_selection(self, message: str) -> None:
        self._selected = None
        self._hint = None
        self._message = message

    def update(self, delta: float) -> None:
        for event in self._animations.update(delta):
            self._on_animation_finished(event)

    def _on_animation_finished(self, event: GameEvent) -> None:
        if event.event_type == GameEventType.LEVEL_WON:
            self._message = "Kurtuldu! N ile sonraki level"
        elif event.event_type == GameEventType.LEVEL_LOST:
            self._message = "Hamle kalmadı. R ile yeniden dene"

    def _highlights(self) -> list[tuple[int, int]]:
        step = self._animations.current
        if step is None:
            return []
        data = step.event.data
        if step.event.event_type == GameEventType.TILES_CLEARED:
            return list(data.get("positions", ()))
        if step.event.event_type == GameEventType.TILES_SPAWNED:
            return [tile["position"] for tile in data.get("tiles", ())]
        if step.event.event_type == GameEventType.CHARACTER_MOVED:
            return [(move["x"], move["to_y"]) for move in data.get("steps", ())]
        return []

    def draw(self, surface: pygame.Surface) -> None:
        state = self._state
        offset = self._board_offset(surface.get_size())
        self._draw_header(surface, state)
        self._renderer.draw(
            surface,
            state,
            offset=offset,
            selected=self._selected,
            highlights=self._highlights(),
            hint=self._hint,
        )
        if self._message:
            text = self._info_font.render(self._message, True, (255, 235, 160))
            board_bottom = offset[1] + state.height * self._renderer.tile_size
            surface.blit(text, (offset[0], board_bottom + 12))

    def _draw_header(self, surface: pygame.Surface, state: GameController.GameViewState) -> None:
        header = self._header_font.render(
            f"Level {state.level_number}/{self._controller.level_count()}: {state.level_name}",
            True,
            (255, 235, 160),
        )
        surface.blit(header, (16, 14))
        moves = self._info_font.render(
            f"Hamle: {state.moves_remaining}/{state.max_moves}", True, (220, 220, 220)
        )
        surface.blit(moves, (16, 46))
