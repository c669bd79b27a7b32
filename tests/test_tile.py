import random

import pytest

from model.tile import SpecialPower, Tile, TileType


def test_color_tile_is_matchable_and_swappable():
    tile = Tile(TileType.RED)
    assert tile.is_color()
    assert tile.is_matchable()
    assert tile.can_swap()


def test_iced_tile_can_join_a_run_but_cannot_be_swapped():
    tile = Tile(TileType.BLUE, ice_layers=2)
    assert tile.is_matchable()
    assert not tile.can_swap()


def test_locked_tile_is_neither_matchable_nor_swappable():
    tile = Tile(TileType.GREEN, locked=True)
    assert not tile.is_matchable()
    assert not tile.can_swap()
    tile.unlock()
    assert tile.can_swap()


@pytest.mark.parametrize("kind", [TileType.EMPTY, TileType.STONE, TileType.EXIT, TileType.ICE, TileType.LOCKED])
def test_non_color_kinds_never_match(kind):
    tile = Tile(kind)
    assert not tile.is_matchable()
    assert not tile.can_swap()


def test_remove_ice_layer_counts_down_to_zero():
    tile = Tile(TileType.RED, ice_layers=2)
    assert tile.remove_ice_layer()
    assert tile.ice_layers == 1
    assert tile.remove_ice_layer()
    assert tile.ice_layers == 0
    assert not tile.remove_ice_layer()
    assert tile.can_swap()


def test_special_power_is_orthogonal_to_kind():
    tile = Tile(TileType.YELLOW)
    tile.set_special(SpecialPower.BOMB)
    assert tile.is_special()
    assert tile.kind == TileType.YELLOW
    tile.clear_special()
    assert not tile.is_special()


def test_clone_copies_decorations():
    tile = Tile(TileType.PURPLE, ice_layers=1, locked=True, special=SpecialPower.LINE_VERTICAL)
    copy = tile.clone()
    assert copy == tile
    assert copy is not tile
    assert copy.snapshot() == ("purple", 1, True, "line-v")


def test_color_lookup_rejects_non_colors():
    assert TileType.color("Red") == TileType.RED
    with pytest.raises(ValueError):
        TileType.color("stone")
    with pytest.raises(ValueError):
        TileType.color("orange")


def test_random_color_uses_palette():
    rng = random.Random(3)
    palette = (TileType.RED, TileType.BLUE)
    kinds = {Tile.random_color(rng, palette).kind for _ in range(50)}
    assert kinds == {TileType.RED, TileType.BLUE}
