"""
Pygame tabanlı View katmanı: görüntüleme döngüsü.
Oyun mantığından bağımsızdır; sadece sahneye olayları iletir ve çizdirir.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import pygame

from view.scene import Scene

logger = logging.getLogger(__name__)

ConfigColor = Tuple[int, int, int]


@dataclass(frozen=True)
class ViewConfig:
    """Pygame ekranı için temel yapılandırma."""

    width: int = 720
    height: int = 900
    fps: int = 60
    tile_size: int = 64
    background_color: ConfigColor = (18, 20, 32)
    title: str = "Free The Man"


class PygameView:
    """Pygame uygulamasını yöneten basit bir renderer."""

    def __init__(self, config: ViewConfig) -> None:
        self._config = config
        self._screen: Optional[pygame.Surface] = None
        self._clock: Optional[pygame.time.Clock] = None

    def initialize(self) -> None:
        """Pygame'i başlatır ve ekranı hazırlar."""
        pygame.init()
        pygame.font.init()
        self._screen = pygame.display.set_mode((self._config.width, self._config.height))
        pygame.display.set_caption(self._config.title)
        self._clock = pygame.time.Clock()
        logger.info(f"Pygame ekranı hazır: {self._config.width}x{self._config.height}")

    def shutdown(self) -> None:
        """Pygame kaynaklarını temizler."""
        pygame.quit()

    def _poll_events(self) -> list[pygame.event.Event]:
        return list(pygame.event.get())

    def render(self, scene: Scene, run_seconds: Optional[float] = None) -> None:
        """
        View döngüsünü çalıştırır.

        :param scene: Çizilecek sahne.
        :param run_seconds: İsteğe bağlı max süre (test/kontrol amacıyla).
        """
        if self._screen is None or self._clock is None:
            raise RuntimeError("View initialize() çağrılmadan render edilemez.")

        running = True
        elapsed = 0.0
        while running:
            delta = self._clock.tick(self._config.fps) / 1000.0
            elapsed += delta

            events = self._poll_events()
            if any(event.type == pygame.QUIT for event in events):
                running = False

            scene.handle_events(events)
            scene.update(delta)

            self._screen.fill(self._config.background_color)
            scene.draw(self._screen)
            pygame.display.flip()

            if run_seconds and elapsed >= run_seconds:
                running = False
