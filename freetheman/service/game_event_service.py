"""
Game Event Service: Observer Pattern implementasyonu.
Çekirdeğin sunum katmanına tek çıkış kanalı: swap, temizleme, düşme,
spawn, karakter hareketi, kazanma/kaybetme eventleri.
Event verileri sadece düz veridir; zamanlama ve görseller view'a aittir.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable


class GameEventType(Enum):
    """Oyun event tipleri."""
    LEVEL_LOADED = "level_loaded"
    STATE_CHANGED = "state_changed"
    MOVES_CHANGED = "moves_changed"
    SWAP_PERFORMED = "swap_performed"
    TILES_CLEARED = "tiles_cleared"
    TILES_FELL = "tiles_fell"
    TILES_SPAWNED = "tiles_spawned"
    CHARACTER_MOVED = "character_moved"
    LEVEL_WON = "level_won"
    LEVEL_LOST = "level_lost"


@dataclass(frozen=True)
class GameEvent:
    """Oyun event verisi."""
    event_type: GameEventType
    data: dict[str, Any]


class GameObserver(ABC):
    """Observer base class - event'leri dinler."""

    @abstractmethod
    def on_event(self, event: GameEvent) -> None:
        """Event geldiğinde çağrılır."""
        pass


class GameEventService:
    """
    Subject (Gözlemlenen) - Observer Pattern.
    Event'leri yönetir ve observer'ları bilgilendirir.
    """

    def __init__(self) -> None:
        self._observers: list[GameObserver] = []
        self._event_listeners: dict[GameEventType, list[Callable[[GameEvent], None]]] = {}

    def attach(self, observer: GameObserver) -> None:
        """Observer ekle (tüm event'leri dinler)."""
        if observer not in self._observers:
            self._observers.append(observer)

    def detach(self, observer: GameObserver) -> None:
        """Observer çıkar."""
        if observer in self._observers:
            self._observers.remove(observer)

    def add_listener(self, event_type: GameEventType, callback: Callable[[GameEvent], None]) -> None:
        """Belirli bir event tipine callback ekle."""
        self._event_listeners.setdefault(event_type, []).append(callback)

    def remove_listener(self, event_type: GameEventType, callback: Callable[[GameEvent], None]) -> None:
        listeners = self._event_listeners.get(event_type, [])
        if callback in listeners:
            listeners.remove(callback)

    def notify(self, event: GameEvent) -> None:
        """Tüm observer'ları bilgilendir."""
        for observer in list(self._observers):
            observer.on_event(event)

        for callback in list(self._event_listeners.get(event.event_type, [])):
            callback(event)

    def emit(self, event_type: GameEventType, **data: Any) -> GameEvent:
        """Event yayınla (kısayol metod)."""
        event = GameEvent(event_type=event_type, data=data)
        self.notify(event)
        return event
