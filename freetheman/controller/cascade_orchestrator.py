"""
Cascade Orchestrator: tek bir oyuncu takasının tüm yaşam döngüsü.

Idle → Swapping → (Matching ⇄ Falling)* → CharacterMoving → {Win | Lose | Idle}

Tamamen senkron ve deterministik çalışır; saat okumaz, beklemez.
Sunum katmanı yayınlanan eventleri kendi hızında oynatır.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from config.game_config import GameConfig
from controller.character_controller import CharacterController, CharacterStep
from model.exceptions import InvariantViolation
from model.game_state import GameState, MoveBudget
from model.grid import Grid, Position
from model.match import Match, MatchResult
from model.tile import Tile
from service.game_event_service import GameEventService, GameEventType
from service.gravity_system import GravityResult, GravitySystem
from service.match_resolver import MatchResolver

logger = logging.getLogger(__name__)


class RejectReason(Enum):
    BUSY = "busy"
    GAME_OVER = "game_over"
    OUT_OF_BOUNDS = "out_of_bounds"
    NOT_SWAPPABLE = "not_swappable"
    NOT_ADJACENT = "not_adjacent"
    NO_MATCH = "no_match"


@dataclass(frozen=True)
class CascadeRound:
    index: int
    matches: tuple[Match, ...]
    result: MatchResult
    gravity: GravityResult


@dataclass
class SwapOutcome:
    first: Position
    second: Position
    accepted: bool
    reason: Optional[RejectReason] = None
    rounds: list[CascadeRound] = field(default_factory=list)
    character_steps: list[CharacterStep] = field(default_factory=list)
    state: GameState = GameState.IDLE

    @property
    def move_consumed(self) -> bool:
        return self.accepted


class CascadeOrchestrator:
    def __init__(
        self,
        grid: Grid,
        character_controller: CharacterController,
        move_budget: MoveBudget,
        event_service: GameEventService,
        config: Optional[GameConfig] = None,
        match_resolver: Optional[MatchResolver] = None,
        gravity_system: Optional[GravitySystem] = None,
    ) -> None:
        self._config = config or GameConfig()
        self._grid = grid
        self._character_controller = character_controller
        self._budget = move_budget
        self._event_service = event_service
        self._resolver = match_resolver or MatchResolver(grid, self._config.match)
        self._gravity = gravity_system or GravitySystem(grid, self._config.rng())
        self._state = GameState.IDLE
        self._processing = False  # Aynı anda tek hamle

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def is_processing(self) -> bool:
        return self._processing

    def _set_state(self, state: GameState) -> None:
        if state == self._state:
            return
        self._state = state
        self._event_service.emit(GameEventType.STATE_CHANGED, state=state.value)

    def _reject(self, p1: Position, p2: Position, reason: RejectReason) -> SwapOutcome:
        logger.debug("Swap %s <-> %s rejected: %s", p1, p2, reason.value)
        return SwapOutcome(first=p1, second=p2, accepted=False, reason=reason, state=self._state)

    def validate_swap(self, p1: Position, p2: Position) -> Optional[RejectReason]:
        """Takas denenmeden önceki kontroller; geçerliyse None."""
        if self._processing:
            return RejectReason.BUSY
        if self._state.is_terminal:
            return RejectReason.GAME_OVER
        if not (self._grid.is_valid_position(*p1) and self._grid.is_valid_position(*p2)):
            return RejectReason.OUT_OF_BOUNDS
        if not (self._grid.tile_at(p1).can_swap() and self._grid.tile_at(p2).can_swap()):
            return RejectReason.NOT_SWAPPABLE
        if not self._grid.is_adjacent(p1, p2):
            return RejectReason.NOT_ADJACENT
        return None

    def request_swap(self, p1: Position, p2: Position) -> SwapOutcome:
        """
        Oyuncunun takas isteğini baştan sona çözer.

        Geçersiz takas hamle harcamaz ve grid'i aynen geri bırakır.
        Hamle bütçesi bu hamleyle sıfırlansa bile cascade ve karakter
        hareketi tamamlanmadan Lose kontrolü yapılmaz.
        """
        reason = self.validate_swap(p1, p2)
        if reason is not None:
            return self._reject(p1, p2, reason)

        self._processing = True
        try:
            self._set_state(GameState.SWAPPING)
            self._grid.swap(p1, p2)
            if not self._resolver.check_swap_for_matches(p1, p2):
                self._grid.swap(p1, p2)
                self._event_service.emit(
                    GameEventType.SWAP_PERFORMED, first=p1, second=p2, success=False
                )
                self._set_state(GameState.IDLE)
                return self._reject(p1, p2, RejectReason.NO_MATCH)

            self._event_service.emit(GameEventType.SWAP_PERFORMED, first=p1, second=p2, success=True)
            self._budget.use_move()
            self._event_service.emit(
                GameEventType.MOVES_CHANGED,
                remaining=self._budget.remaining,
                max_moves=self._budget.max_moves,
            )

            rounds = self.resolve_cascades()
            steps = self._move_character()
            self._evaluate_end_state()
            return SwapOutcome(
                first=p1,
                second=p2,
                accepted=True,
                rounds=rounds,
                character_steps=steps,
                state=self._state,
            )
        finally:
            self._processing = False

    def resolve_cascades(self) -> list[CascadeRound]:
        """Eşleşme kalmayana kadar eşleş → temizle → düş → doldur."""
        rounds: list[CascadeRound] = []
        while True:
            self._set_state(GameState.MATCHING)
            matches = self._resolver.find_all_matches()
            if not matches:
                return rounds
            if len(rounds) >= self._config.max_cascade_rounds:
                raise InvariantViolation(
                    f"Cascade {self._config.max_cascade_rounds} turda durmadı"
                )

            result = self._resolver.process_matches(matches)
            self._apply_clear(result)
            self._event_service.emit(
                GameEventType.TILES_CLEARED,
                positions=list(result.cleared_positions),
                specials=[
                    {"position": s.position, "power": s.power.value, "color": s.color.value}
                    for s in result.special_tiles
                ],
                ice_damaged=list(result.ice_damaged),
                unlocked=list(result.unlocked),
                activated=[(pos, power.value) for pos, power in result.activated_specials],
            )

            self._set_state(GameState.FALLING)
            gravity = self._gravity.process_gravity()
            self._event_service.emit(
                GameEventType.TILES_FELL,
                movements=[{"from": m.source, "to": m.target} for m in gravity.movements],
            )
            self._event_service.emit(
                GameEventType.TILES_SPAWNED,
                tiles=[{"position": s.position, "color": s.color.value} for s in gravity.spawned],
            )

            rounds.append(
                CascadeRound(index=len(rounds), matches=tuple(matches), result=result, gravity=gravity)
            )
            logger.debug(
                "Cascade round %d: %d matches, %d cleared, %d specials",
                len(rounds),
                len(matches),
                len(result.cleared_positions),
                len(result.special_tiles),
            )

    def _apply_clear(self, result: MatchResult) -> None:
        for x, y in result.cleared_positions:
            if self._grid.is_fixed(x, y):
                raise InvariantViolation(f"Sabit hücre temizlenemez: {(x, y)}")
            self._grid.set_empty(x, y)

        for special in result.special_tiles:
            x, y = special.position
            tile = self._grid.tile_at(special.position)
            if tile.is_empty():
                self._grid.set_tile(x, y, Tile(special.color, special=special.power))
            else:
                # Buzu henüz erimemiş merkez tile special'ı üzerine alır
                tile.set_special(special.power)

    def _move_character(self) -> list[CharacterStep]:
        self._set_state(GameState.CHARACTER_MOVING)
        steps = self._character_controller.move_to_highest_empty()
        if steps:
            self._event_service.emit(
                GameEventType.CHARACTER_MOVED,
                steps=[{"x": s.x, "from_y": s.from_y, "to_y": s.to_y} for s in steps],
                position=self._character_controller.position,
            )
        return steps

    def _evaluate_end_state(self) -> None:
        if self._character_controller.has_escaped():
            self._set_state(GameState.WIN)
            self._event_service.emit(
                GameEventType.LEVEL_WON,
                moves_used=self._budget.moves_used,
                moves_remaining=self._budget.remaining,
            )
        elif self._budget.is_exhausted():
            self._set_state(GameState.LOSE)
            self._event_service.emit(GameEventType.LEVEL_LOST)
        else:
            self._set_state(GameState.IDLE)

    def find_hint(self) -> Optional[tuple[Position, Position]]:
        if self._processing or self._state.is_terminal:
            return None
        return self._grid.find_hint()
