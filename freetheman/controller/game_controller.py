"""
Game controller: level yaşam döngüsü ve oyun sorguları.
View sadece intent (takas, yeniden başlat, sonraki level) iletir ve state okur.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from config.game_config import GameConfig
from controller.cascade_orchestrator import CascadeOrchestrator, SwapOutcome
from controller.character_controller import CharacterController
from model.game_state import GameState, MoveBudget
from model.grid import Grid, Position
from model.level import LevelDefinition
from service.game_event_service import GameEventService, GameEventType
from service.game_observers import CascadeStatsObserver, LoggerObserver
from service.gravity_system import GravitySystem
from service.level_service import LevelService
from service.level_validator import LevelValidator
from service.match_resolver import MatchResolver
from repository.level_repository_json import LevelRepositoryJSON

logger = logging.getLogger(__name__)


class GameController:
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        level_service: Optional[LevelService] = None,
        event_service: Optional[GameEventService] = None,
    ) -> None:
        self._config = config or GameConfig()
        self._level_service = level_service or LevelService(
            LevelRepositoryJSON(
                self._config.levels_path,
                LevelValidator(self._config.matchable_colors, self._config.match.min_match),
                self._config.default_max_moves,
            )
        )
        self._event_service = event_service or GameEventService()
        self._stats = CascadeStatsObserver()
        self._event_service.attach(self._stats)
        self._event_service.attach(LoggerObserver())
        self._rng = self._config.rng()

        self._level: Optional[LevelDefinition] = None
        self._grid: Optional[Grid] = None
        self._character_controller: Optional[CharacterController] = None
        self._budget: Optional[MoveBudget] = None
        self._orchestrator: Optional[CascadeOrchestrator] = None

    @dataclass(frozen=True)
    class CellView:
        x: int
        y: int
        kind: str
        ice_layers: int
        locked: bool
        special: Optional[str]

    @dataclass(frozen=True)
    class GameViewState:
        width: int
        height: int
        cells: tuple["GameController.CellView", ...]
        character: Position
        exit_position: Position
        moves_remaining: int
        max_moves: int
        level_number: Optional[int]
        level_name: str
        state: GameState

    @property
    def event_service(self) -> GameEventService:
        return self._event_service

    @property
    def stats(self) -> CascadeStatsObserver:
        return self._stats

    @property
    def grid(self) -> Grid:
        if self._grid is None:
            raise RuntimeError("Henüz level yüklenmedi")
        return self._grid

    @property
    def current_level(self) -> LevelDefinition:
        if self._level is None:
            raise RuntimeError("Henüz level yüklenmedi")
        return self._level

    def _require_orchestrator(self) -> CascadeOrchestrator:
        if self._orchestrator is None:
            raise RuntimeError("Henüz level yüklenmedi")
        return self._orchestrator

    def _require_budget(self) -> MoveBudget:
        if self._budget is None:
            raise RuntimeError("Henüz level yüklenmedi")
        return self._budget

    # Level yaşam döngüsü

    def load_level(self, level_id: int) -> LevelDefinition:
        """LevelService'ten level'i alır ve taze bir grid/karakter çifti kurar."""
        level = self._level_service.load_level(level_id)
        self._start(level)
        return level

    def load_definition(self, level: LevelDefinition) -> LevelDefinition:
        """Repository dışından gelen bir level'i doğrulayıp başlatır."""
        LevelValidator(self._config.matchable_colors, self._config.match.min_match).validate(level)
        self._start(level)
        return level

    def _start(self, level: LevelDefinition) -> None:
        grid = Grid(level.width, level.height, self._config.match.min_match)
        grid.initialize(level, self._rng)
        character_controller = CharacterController(grid)
        character_controller.initialize(level.character_start, level.exit_row)
        budget = MoveBudget(level.max_moves)

        self._level = level
        self._grid = grid
        self._character_controller = character_controller
        self._budget = budget
        self._orchestrator = CascadeOrchestrator(
            grid,
            character_controller,
            budget,
            self._event_service,
            self._config,
            match_resolver=MatchResolver(grid, self._config.match),
            gravity_system=GravitySystem(grid, self._rng),
        )

        logger.info(f"Level {level.id} başladı: {level.name} ({level.width}x{level.height})")
        self._event_service.emit(
            GameEventType.LEVEL_LOADED,
            level=level.id,
            name=level.name,
            width=level.width,
            height=level.height,
        )
        self._event_service.emit(
            GameEventType.MOVES_CHANGED, remaining=budget.remaining, max_moves=budget.max_moves
        )

    def start_first_level(self) -> LevelDefinition:
        first = self._level_service.get_first_level_id()
        if first is None:
            raise RuntimeError("Yüklenecek level yok")
        return self.load_level(first)

    def restart_level(self) -> LevelDefinition:
        """Mevcut level'i sıfırdan (yeni grid ile) başlatır."""
        level = self.current_level
        self._start(level)
        return level

    def has_more_levels(self) -> bool:
        return self._level_service.has_next_level()

    def load_next_level(self) -> bool:
        next_id = self._level_service.get_next_level_id()
        if next_id is None:
            return False
        self.load_level(next_id)
        return True

    # Oyun akışı

    def request_swap(self, p1: Position, p2: Position) -> SwapOutcome:
        return self._require_orchestrator().request_swap(p1, p2)

    def find_hint(self) -> Optional[tuple[Position, Position]]:
        return self._require_orchestrator().find_hint()

    def has_possible_move(self) -> bool:
        return self.grid.has_possible_move()

    def add_moves(self, moves: int) -> None:
        budget = self._require_budget()
        budget.add_moves(moves)
        self._event_service.emit(
            GameEventType.MOVES_CHANGED, remaining=budget.remaining, max_moves=budget.max_moves
        )

    # Sorgular

    def moves_remaining(self) -> int:
        return self._require_budget().remaining

    def max_moves(self) -> int:
        return self._require_budget().max_moves

    def moves_used(self) -> int:
        return self._require_budget().moves_used

    def current_level_number(self) -> Optional[int]:
        if self._level is None:
            return None
        if self._level_service.get_current_level_id() == self._level.id:
            return self._level_service.get_current_level_index()
        return self._level.id

    def level_count(self) -> int:
        return self._level_service.get_level_count()

    def game_state(self) -> GameState:
        return self._require_orchestrator().state

    def is_game_over(self) -> bool:
        return self.game_state().is_terminal

    def has_won(self) -> bool:
        return self.game_state() == GameState.WIN

    def has_lost(self) -> bool:
        return self.game_state() == GameState.LOSE

    def character_position(self) -> Position:
        if self._character_controller is None or self._character_controller.position is None:
            raise RuntimeError("Henüz level yüklenmedi")
        return self._character_controller.position

    def view_state(self) -> "GameController.GameViewState":
        grid = self.grid
        budget = self._require_budget()
        cells = tuple(
            GameController.CellView(
                x=x,
                y=y,
                kind=tile.kind.value,
                ice_layers=tile.ice_layers,
                locked=tile.locked,
                special=tile.special.value if tile.special else None,
            )
            for x, y in grid.positions()
            for tile in (grid.tile_at((x, y)),)
        )
        return GameController.GameViewState(
            width=grid.width,
            height=grid.height,
            cells=cells,
            character=self.character_position(),
            exit_position=grid.exit_position,
            moves_remaining=budget.remaining,
            max_moves=budget.max_moves,
            level_number=self.current_level_number(),
            level_name=self.current_level.name,
            state=self.game_state(),
        )
