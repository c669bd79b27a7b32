from service.game_event_service import GameEvent, GameEventService, GameEventType
from service.game_observers import CascadeStatsObserver, EventRecorder


def test_observers_and_listeners_receive_events():
    service = GameEventService()
    recorder = EventRecorder()
    service.attach(recorder)
    service.attach(recorder)
    heard = []
    service.add_listener(GameEventType.LEVEL_WON, heard.append)

    event = service.emit(GameEventType.LEVEL_WON, moves_used=3, moves_remaining=7)
    service.emit(GameEventType.LEVEL_LOST)

    assert event == GameEvent(GameEventType.LEVEL_WON, {"moves_used": 3, "moves_remaining": 7})
    assert recorder.types() == [GameEventType.LEVEL_WON, GameEventType.LEVEL_LOST]
    assert heard == [event]


def test_detach_and_remove_listener():
    service = GameEventService()
    recorder = EventRecorder()
    heard = []
    service.attach(recorder)
    service.add_listener(GameEventType.TILES_FELL, heard.append)

    service.detach(recorder)
    service.remove_listener(GameEventType.TILES_FELL, heard.append)
    service.emit(GameEventType.TILES_FELL, movements=[])

    assert recorder.events == ()
    assert heard == []


def test_recorder_drain_empties_buffer():
    service = GameEventService()
    recorder = EventRecorder()
    service.attach(recorder)
    service.emit(GameEventType.MOVES_CHANGED, remaining=1, max_moves=2)

    drained = recorder.drain()

    assert [e.data["remaining"] for e in drained] == [1]
    assert recorder.events == ()
    assert recorder.of_type(GameEventType.MOVES_CHANGED) == []


def test_cascade_stats():
    service = GameEventService()
    stats = CascadeStatsObserver()
    service.attach(stats)

    service.emit(GameEventType.SWAP_PERFORMED, first=(0, 0), second=(1, 0), success=True)
    service.emit(GameEventType.TILES_CLEARED, positions=[(0, 0), (1, 0), (2, 0)], specials=[])
    service.emit(GameEventType.TILES_CLEARED, positions=[(0, 1), (1, 1), (2, 1), (3, 1)], specials=[{}])
    service.emit(GameEventType.SWAP_PERFORMED, first=(0, 0), second=(1, 0), success=True)
    service.emit(GameEventType.TILES_CLEARED, positions=[(4, 4)], specials=[])

    assert stats.tiles_cleared == 8
    assert stats.specials_created == 1
    assert stats.longest_cascade == 2

    service.emit(GameEventType.LEVEL_LOADED, level=2)
    assert (stats.tiles_cleared, stats.specials_created, stats.longest_cascade) == (0, 0, 0)
