"""
Game Event Observers: Concrete observer implementasyonları.
"""
from __future__ import annotations

import logging

from service.game_event_service import GameEvent, GameEventType, GameObserver

logger = logging.getLogger(__name__)


class LoggerObserver(GameObserver):
    """Debug için tüm eventleri logla."""

    def on_event(self, event: GameEvent) -> None:
        if event.event_type in (GameEventType.LEVEL_WON, GameEventType.LEVEL_LOST):
            logger.info(f"Game Event: {event.event_type.value}, Data: {event.data}")
        else:
            logger.debug(f"Game Event: {event.event_type.value}, Data: {event.data}")


class EventRecorder(GameObserver):
    """
    Eventleri sırayla biriktirir. Sunum katmanı ve testler
    drain() ile kendi hızında tüketir.
    """

    def __init__(self) -> None:
        self._events: list[GameEvent] = []

    def on_event(self, event: GameEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> tuple[GameEvent, ...]:
        return tuple(self._events)

    def types(self) -> list[GameEventType]:
        return [event.event_type for event in self._events]

    def of_type(self, event_type: GameEventType) -> list[GameEvent]:
        return [event for event in self._events if event.event_type == event_type]

    def drain(self) -> list[GameEvent]:
        events, self._events = self._events, []
        return events

    def clear(self) -> None:
        self._events = []


class CascadeStatsObserver(GameObserver):
    """Level boyunca temizlenen tile, oluşan special ve en uzun cascade istatistiği."""

    def __init__(self) -> None:
        self.tiles_cleared: int = 0
        self.specials_created: int = 0
        self.longest_cascade: int = 0
        self._current_cascade: int = 0

    def on_event(self, event: GameEvent) -> None:
        if event.event_type == GameEventType.SWAP_PERFORMED:
            self._current_cascade = 0

        elif event.event_type == GameEventType.TILES_CLEARED:
            self._current_cascade += 1
            self.longest_cascade = max(self.longest_cascade, self._current_cascade)
            self.tiles_cleared += len(event.data.get("positions", ()))
            self.specials_created += len(event.data.get("specials", ()))

        elif event.event_type == GameEventType.LEVEL_LOADED:
            self.reset()

        elif event.event_type == GameEventType.LEVEL_WON:
            logger.info(
                f"Level stats: cleared={self.tiles_cleared}, specials={self.specials_created}, "
                f"longest cascade={self.longest_cascade}"
            )

    def reset(self) -> None:
        """İstatistikleri sıfırla (yeni level için)."""
        self.tiles_cleared = 0
        self.specials_created = 0
        self.longest_cascade = 0
        self._current_cascade = 0
