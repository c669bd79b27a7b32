import pytest

from board_helpers import Harness
from config.game_config import GameConfig
from controller.cascade_orchestrator import RejectReason
from model.exceptions import InvariantViolation
from model.game_state import GameState
from service.game_event_service import GameEventType
from service.match_resolver import MatchResolver

BOARD = [
    "BGXYB",
    "GYBGY",
    "YBGYG",
    "RRBRG",
    "BG@GB",
]

# Karakterin hemen üstü exit: ilk geçerli hamleden sonra kaçar
ESCAPE_BOARD = [
    "GBXYG",
    "BY@GB",
    "RRBRY",
]


def test_valid_swap_consumes_one_move_and_resolves():
    harness = Harness(BOARD, max_moves=10)

    outcome = harness.orchestrator.request_swap((2, 3), (3, 3))

    assert outcome.accepted
    assert outcome.reason is None
    assert harness.budget.remaining == 9
    assert harness.budget.moves_used == 1
    assert outcome.rounds[0].result.cleared_positions == [(0, 3), (1, 3), (2, 3)]
    assert outcome.character_steps == []
    assert outcome.state == GameState.IDLE
    assert harness.orchestrator.state == GameState.IDLE
    assert MatchResolver(harness.grid).find_all_matches() == []
    assert harness.grid.tile_at((2, 0)).is_exit()
    assert harness.grid.tile_at((2, 4)).is_empty()


def test_valid_swap_event_sequence():
    harness = Harness(BOARD, max_moves=10)

    harness.orchestrator.request_swap((2, 3), (3, 3))

    types = [t for t in harness.recorder.types() if t != GameEventType.STATE_CHANGED]
    assert types[:5] == [
        GameEventType.SWAP_PERFORMED,
        GameEventType.MOVES_CHANGED,
        GameEventType.TILES_CLEARED,
        GameEventType.TILES_FELL,
        GameEventType.TILES_SPAWNED,
    ]
    swap = harness.recorder.of_type(GameEventType.SWAP_PERFORMED)[0]
    assert swap.data == {"first": (2, 3), "second": (3, 3), "success": True}
    cleared = harness.recorder.of_type(GameEventType.TILES_CLEARED)[0]
    assert cleared.data["positions"] == [(0, 3), (1, 3), (2, 3)]
    assert cleared.data["specials"] == []
    assert GameEventType.CHARACTER_MOVED not in types
    assert GameEventType.LEVEL_WON not in types


@pytest.mark.parametrize(
    "first, second, reason",
    [
        ((4, 4), (5, 4), RejectReason.OUT_OF_BOUNDS),
        ((0, 0), (1, 1), RejectReason.NOT_ADJACENT),
        ((1, 4), (2, 4), RejectReason.NOT_SWAPPABLE),
        ((1, 0), (2, 0), RejectReason.NOT_SWAPPABLE),
    ],
)
def test_rejected_swaps_change_nothing(first, second, reason):
    harness = Harness(BOARD, max_moves=10)
    before = harness.grid.snapshot()

    outcome = harness.orchestrator.request_swap(first, second)

    assert not outcome.accepted
    assert outcome.reason == reason
    assert harness.budget.remaining == 10
    assert harness.grid.snapshot() == before
    assert harness.recorder.events == ()


def test_iced_tile_cannot_be_swapped():
    harness = Harness(BOARD, max_moves=10)
    harness.grid.tile_at((2, 3)).add_ice(1)

    outcome = harness.orchestrator.request_swap((2, 3), (3, 3))

    assert outcome.reason == RejectReason.NOT_SWAPPABLE
    assert harness.budget.remaining == 10


def test_swap_without_match_is_reverted_for_free():
    harness = Harness(BOARD, max_moves=10)
    before = harness.grid.snapshot()

    outcome = harness.orchestrator.request_swap((0, 0), (1, 0))

    assert outcome.reason == RejectReason.NO_MATCH
    assert harness.grid.snapshot() == before
    assert harness.budget.remaining == 10
    assert harness.orchestrator.state == GameState.IDLE
    swaps = harness.recorder.of_type(GameEventType.SWAP_PERFORMED)
    assert [event.data["success"] for event in swaps] == [False]
    assert harness.recorder.of_type(GameEventType.MOVES_CHANGED) == []


def test_last_move_resolves_fully_before_losing():
    harness = Harness(BOARD, max_moves=1)

    outcome = harness.orchestrator.request_swap((2, 3), (3, 3))

    assert outcome.accepted
    assert outcome.rounds
    assert outcome.state == GameState.LOSE
    assert harness.budget.remaining == 0
    assert harness.recorder.types()[-1] == GameEventType.LEVEL_LOST
    assert harness.grid.get_tile(0, 3).is_color()

    again = harness.orchestrator.request_swap((0, 0), (1, 0))
    assert again.reason == RejectReason.GAME_OVER


def test_escape_wins_even_on_last_move():
    harness = Harness(ESCAPE_BOARD, max_moves=1)

    outcome = harness.orchestrator.request_swap((2, 2), (3, 2))

    assert outcome.state == GameState.WIN
    assert outcome.character_steps[-1].to_y == 0
    assert harness.character.has_escaped()
    won = harness.recorder.of_type(GameEventType.LEVEL_WON)
    assert len(won) == 1
    assert won[0].data == {"moves_used": 1, "moves_remaining": 0}
    assert GameEventType.LEVEL_LOST not in harness.recorder.types()
    moved = harness.recorder.of_type(GameEventType.CHARACTER_MOVED)[0]
    assert moved.data["position"] == (2, 0)


def test_requests_during_a_cycle_are_ignored():
    harness = Harness(BOARD, max_moves=10)
    nested = []
    harness.events.add_listener(
        GameEventType.TILES_CLEARED,
        lambda event: nested.append(harness.orchestrator.request_swap((0, 0), (1, 0))),
    )

    outcome = harness.orchestrator.request_swap((2, 3), (3, 3))

    assert outcome.accepted
    assert nested and all(result.reason == RejectReason.BUSY for result in nested)
    assert harness.budget.remaining == 9
    assert not harness.orchestrator.is_processing


def test_runaway_cascade_limit_raises():
    harness = Harness(BOARD, max_moves=10, config=GameConfig(max_cascade_rounds=0))
    with pytest.raises(InvariantViolation):
        harness.orchestrator.request_swap((2, 3), (3, 3))
    assert not harness.orchestrator.is_processing


def test_four_run_places_line_special_at_center():
    board = [
        "BGXYB",
        "GYBGY",
        "YBRYG",
        "RRBRG",
        "BG@GB",
    ]
    harness = Harness(board, max_moves=10)

    outcome = harness.orchestrator.request_swap((2, 3), (2, 2))

    first = outcome.rounds[0].result
    assert [(s.power.value, s.position) for s in first.special_tiles] == [("line-v", (2, 3))]
    cleared = harness.recorder.of_type(GameEventType.TILES_CLEARED)[0]
    assert cleared.data["specials"] == [{"position": (2, 3), "power": "line-v", "color": "red"}]


def test_hint_is_available_only_when_idle():
    harness = Harness(BOARD, max_moves=1)
    assert harness.orchestrator.find_hint() is not None
    harness.orchestrator.request_swap((2, 3), (3, 3))
    assert harness.orchestrator.find_hint() is None


@pytest.mark.parametrize("seed", range(1, 21))
def test_cascades_settle_within_board_size_rounds(seed):
    harness = Harness(BOARD, max_moves=10, seed=seed)
    board_size = harness.grid.width * harness.grid.height

    outcome = harness.orchestrator.request_swap((2, 3), (3, 3))

    assert outcome.accepted
    assert 1 <= len(outcome.rounds) <= board_size
    assert [r.index for r in outcome.rounds] == list(range(len(outcome.rounds)))
    assert MatchResolver(harness.grid).find_all_matches() == []
    assert not harness.orchestrator.is_processing
