"""
Animation Queue: çekirdeğin yayınladığı eventleri sunum hızında oynatır.

Çekirdek hamleyi anında ve senkron çözer; bu kuyruk sadece eventleri
sırayla, AnimationTimings'teki sürelerle "oynuyormuş gibi" tutar.
Oyun sonucunu hiçbir şekilde etkilemez: kuyruk atlansa da, yavaşlatılsa da
grid aynı kalır. pygame'e bağımlı değildir.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Optional

from config.game_config import AnimationTimings
from service.game_event_service import GameEvent, GameEventType, GameObserver


@dataclass
class PlaybackStep:
    event: GameEvent
    duration: float
    elapsed: float = 0.0

    @property
    def progress(self) -> float:
        if self.duration <= 0:
            return 1.0
        return min(1.0, self.elapsed / self.duration)

    @property
    def finished(self) -> bool:
        return self.elapsed >= self.duration


class AnimationQueue(GameObserver):
    def __init__(self, timings: Optional[AnimationTimings] = None, speed: float = 1.0) -> None:
        self._timings = timings or AnimationTimings()
        self._speed = speed
        self._pending: deque[PlaybackStep] = deque()
        self._current: Optional[PlaybackStep] = None

    def duration_for(self, event: GameEvent) -> float:
        """Bir event'in oynatma süresi (saniye). Süresi olmayan eventler anında geçer."""
        timings = self._timings
        event_type = event.event_type
        if event_type == GameEventType.SWAP_PERFORMED:
            # Geçersiz takas gidip geri döner
            return timings.swap if event.data.get("success") else timings.swap * 2
        if event_type == GameEventType.TILES_CLEARED:
            return timings.match
        if event_type == GameEventType.TILES_FELL:
            return timings.fall if event.data.get("movements") else 0.0
        if event_type == GameEventType.TILES_SPAWNED:
            if not event.data.get("tiles"):
                return timings.cascade_delay
            return timings.spawn + timings.cascade_delay
        if event_type == GameEventType.CHARACTER_MOVED:
            return timings.character_move * len(event.data.get("steps", ()))
        return 0.0

    def on_event(self, event: GameEvent) -> None:
        self._pending.append(PlaybackStep(event, self.duration_for(event)))

    @property
    def current(self) -> Optional[PlaybackStep]:
        return self._current

    @property
    def is_busy(self) -> bool:
        return self._current is not None or bool(self._pending)

    def __len__(self) -> int:
        return len(self._pending) + (1 if self._current else 0)

    def set_speed(self, speed: float) -> None:
        self._speed = max(0.0, speed)

    def update(self, delta: float) -> list[GameEvent]:
        """
        Zamanı ilerletir ve bu karede tamamlanan eventleri döndürür.
        Artan süre bir sonraki adıma aktarılır.
        """
        finished: list[GameEvent] = []
        remaining = delta * self._speed
        while True:
            if self._current is None:
                if not self._pending:
                    return finished
                self._current = self._pending.popleft()
            step = self._current
            needed = step.duration - step.elapsed
            if remaining < needed:
                step.elapsed += remaining
                return finished
            remaining -= max(0.0, needed)
            step.elapsed = step.duration
            finished.append(step.event)
            self._current = None

    def skip_all(self) -> list[GameEvent]:
        """Bekleyen tüm animasyonları atlar."""
        skipped = [self._current.event] if self._current else []
        skipped.extend(step.event for step in self._pending)
        self._current = None
        self._pending.clear()
        return skipped
