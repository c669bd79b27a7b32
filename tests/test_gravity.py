import random

import pytest

from board_helpers import make_grid
from model.exceptions import InvariantViolation
from model.tile import TileType
from service.gravity_system import FallMovement, GravitySystem


def _column(grid, x):
    return [grid.tile_at((x, y)).kind for y in range(grid.height)]


def test_process_gravity_compacts_and_refills():
    grid = make_grid([
        "BXG",
        "R.B",
        "..Y",
        "G@R",
    ])
    gravity = GravitySystem(grid, random.Random(5))

    result = gravity.process_gravity()

    assert _column(grid, 0)[1:] == [TileType.BLUE, TileType.RED, TileType.GREEN]
    assert grid.tile_at((0, 0)).is_color()
    assert _column(grid, 2) == [TileType.GREEN, TileType.BLUE, TileType.YELLOW, TileType.RED]
    assert grid.tile_at((1, 0)).is_exit()
    assert grid.tile_at((1, 3)).is_empty()
    assert {spawn.position for spawn in result.spawned} == {(0, 0), (1, 1), (1, 2)}
    assert all(spawn.color in grid.tile_types for spawn in result.spawned)
    assert FallMovement(source=(0, 1), target=(0, 2)) in result.movements
    assert gravity.get_empty_positions() == []


def test_tiles_fall_past_stones():
    grid = make_grid([
        "RX",
        "#B",
        ".G",
        "Y@",
    ])
    gravity = GravitySystem(grid, random.Random(1))

    movements = gravity.apply_gravity()

    assert movements == [FallMovement(source=(0, 0), target=(0, 2))]
    assert grid.tile_at((0, 1)).kind == TileType.STONE
    assert grid.tile_at((0, 2)).kind == TileType.RED
    assert grid.tile_at((0, 0)).is_empty()


def test_single_pass_versus_full_compaction():
    grid = make_grid([
        "RX",
        "G.",
        ".B",
        "Y@",
    ])
    gravity = GravitySystem(grid, random.Random(1))

    first = gravity.apply_gravity()
    assert first == [FallMovement(source=(0, 1), target=(0, 2))]

    passes = gravity.apply_gravity_fully()
    assert passes == [[FallMovement(source=(0, 0), target=(0, 1))]]
    assert gravity.apply_gravity() == []


def test_spawn_never_targets_fixed_cells():
    grid = make_grid([
        "..X..",
        ".#.#.",
        "..@..",
    ])
    gravity = GravitySystem(grid, random.Random(9))

    spawned = gravity.spawn_new_tiles()

    assert len(spawned) == 11
    assert grid.tile_at((2, 0)).is_exit()
    assert grid.tile_at((1, 1)).kind == TileType.STONE
    assert grid.tile_at((2, 2)).is_empty()


@pytest.mark.parametrize("seed", range(5))
def test_fixed_cells_survive_repeated_gravity(seed):
    grid = make_grid([
        "R.X.G",
        ".#.#.",
        "B...Y",
        "G.@.R",
    ])
    gravity = GravitySystem(grid, random.Random(seed))

    for _ in range(3):
        gravity.process_gravity()
        grid.set_empty(0, 3)
        grid.set_empty(4, 0)

    assert grid.tile_at((2, 0)).is_exit()
    assert grid.tile_at((1, 1)).kind == TileType.STONE
    assert grid.tile_at((3, 1)).kind == TileType.STONE
    assert grid.tile_at((2, 3)).is_empty()


def test_same_seed_gives_same_refill():
    rows = ["R.X", "...", "G.@"]
    first = make_grid(rows)
    second = make_grid(rows)

    GravitySystem(first, random.Random(42)).process_gravity()
    GravitySystem(second, random.Random(42)).process_gravity()

    assert first.snapshot() == second.snapshot()


def test_overwritten_exit_is_reported():
    grid = make_grid(["RX", "G@"])
    grid.exit_position = (0, 0)
    gravity = GravitySystem(grid, random.Random(0))
    grid.set_empty(0, 0)
    with pytest.raises(InvariantViolation):
        gravity.process_gravity()
