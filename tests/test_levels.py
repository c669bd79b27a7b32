import json

import pytest

from model.exceptions import LevelConfigError
from model.level import BlockerType, LevelDefinition
from repository.level_repository_json import LevelRepositoryJSON
from service.level_service import LevelService
from service.level_validator import LevelValidator


def _record(**overrides):
    record = {
        "id": 1,
        "name": "Test",
        "gridWidth": 5,
        "gridHeight": 6,
        "maxMoves": 10,
        "characterStart": {"x": 2, "y": 5},
        "exitPosition": {"x": 2, "y": 0},
        "blockers": [],
        "tileTypes": ["red", "blue", "green"],
    }
    record.update(overrides)
    return record


def _write(tmp_path, data):
    path = tmp_path / "levels.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_bundled_levels_load_in_order():
    repository = LevelRepositoryJSON()
    levels = list(repository.find_all())

    assert [level.id for level in levels] == [1, 2, 3, 4, 5]
    first = repository.find_by_id(1)
    assert (first.name, first.width, first.height, first.max_moves) == ("First Steps", 7, 8, 25)
    assert first.character_start == (3, 7)
    assert first.exit_position == (3, 0)
    assert first.palette == ("red", "blue", "green", "yellow")
    assert repository.find_by_id(99) is None


def test_bundled_levels_use_every_blocker_kind():
    kinds = {
        blocker.type
        for level in LevelRepositoryJSON().find_all()
        for blocker in level.blockers
    }
    assert kinds == {BlockerType.STONE, BlockerType.ICE, BlockerType.LOCKED}


def test_from_dict_accepts_short_field_names_and_defaults():
    level = LevelDefinition.from_dict(
        {"id": 7, "width": 6, "height": 9, "palette": ["Red", "BLUE", "green"]},
        default_max_moves=15,
    )
    assert level.max_moves == 15
    assert level.character_start == (3, 8)
    assert level.exit_position == (3, 0)
    assert level.palette == ("red", "blue", "green")
    assert level.name == "Level 7"


def test_to_dict_round_trips_blockers():
    record = _record(blockers=[{"type": "ice", "x": 1, "y": 2, "iceLayer": 2, "color": "red"}])
    level = LevelDefinition.from_dict(record)
    assert LevelDefinition.from_dict(level.to_dict()) == level


def test_wrapped_level_list_is_accepted(tmp_path):
    path = _write(tmp_path, {"levels": [_record(id=2), _record(id=1)]})
    assert [level.id for level in LevelRepositoryJSON(path).find_all()] == [1, 2]


def test_malformed_json_raises_level_config_error(tmp_path):
    path = tmp_path / "levels.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(LevelConfigError):
        list(LevelRepositoryJSON(path).find_all())


def test_missing_file_raises_level_config_error(tmp_path):
    with pytest.raises(LevelConfigError):
        LevelRepositoryJSON(tmp_path / "nope.json").find_by_id(1)


def test_duplicate_ids_are_rejected(tmp_path):
    path = _write(tmp_path, [_record(), _record()])
    with pytest.raises(LevelConfigError):
        list(LevelRepositoryJSON(path).find_all())


def test_unknown_blocker_type_is_a_config_error(tmp_path):
    path = _write(tmp_path, [_record(blockers=[{"type": "lava", "x": 0, "y": 0}])])
    with pytest.raises(LevelConfigError):
        list(LevelRepositoryJSON(path).find_all())


def test_non_object_blocker_entry_is_a_config_error(tmp_path):
    path = _write(tmp_path, [_record(blockers=["stone"])])
    with pytest.raises(LevelConfigError):
        list(LevelRepositoryJSON(path).find_all())


@pytest.mark.parametrize(
    "overrides",
    [
        {"gridWidth": 0},
        {"maxMoves": 0},
        {"tileTypes": ["red", "blue"]},
        {"tileTypes": ["red", "blue", "orange"]},
        {"tileTypes": ["red", "red", "blue"]},
        {"characterStart": {"x": 5, "y": 5}},
        {"exitPosition": {"x": 2, "y": -1}},
        {"exitPosition": {"x": 2, "y": 5}},
        {"blockers": [{"type": "stone", "x": 2, "y": 0}]},
        {"blockers": [{"type": "stone", "x": 1, "y": 1}, {"type": "ice", "x": 1, "y": 1}]},
        {"blockers": [{"type": "stone", "x": 9, "y": 1}]},
        {"blockers": [{"type": "locked", "x": 1, "y": 1, "color": "purple"}]},
    ],
)
def test_validator_rejects_invalid_levels(overrides):
    level = LevelDefinition.from_dict(_record(**overrides))
    with pytest.raises(LevelConfigError):
        LevelValidator().validate(level)


def test_validator_honours_allowed_colors():
    level = LevelDefinition.from_dict(_record(tileTypes=["red", "blue", "purple"]))
    assert LevelValidator().validate(level) is level
    with pytest.raises(LevelConfigError):
        LevelValidator(["red", "blue", "green"]).validate(level)


def _ice(x, y, color, **extra):
    return {"type": "ice", "x": x, "y": y, "color": color, **extra}


def test_validator_rejects_colored_ice_that_starts_as_a_run():
    row = _record(blockers=[_ice(0, 3, "red"), _ice(1, 3, "red"), _ice(2, 3, "red")])
    column = _record(blockers=[_ice(4, 1, "blue"), _ice(4, 2, "blue"), _ice(4, 3, "blue")])
    for record in (row, column):
        with pytest.raises(LevelConfigError):
            LevelValidator().validate(LevelDefinition.from_dict(record))


def test_validator_accepts_colored_ice_without_a_run():
    mixed = _record(blockers=[_ice(0, 3, "red"), _ice(1, 3, "red"), _ice(2, 3, "blue")])
    locked = _record(blockers=[_ice(0, 3, "red"), _ice(1, 3, "red", locked=True), _ice(2, 3, "red")])
    for record in (mixed, locked):
        level = LevelDefinition.from_dict(record)
        assert LevelValidator().validate(level) is level


def test_validator_run_length_follows_min_match():
    level = LevelDefinition.from_dict(_record(blockers=[_ice(0, 3, "red"), _ice(1, 3, "red")]))
    assert LevelValidator().validate(level) is level
    with pytest.raises(LevelConfigError):
        LevelValidator(min_match=2).validate(level)


def test_level_service_progression(tmp_path):
    path = _write(tmp_path, [_record(id=1), _record(id=2), _record(id=3)])
    service = LevelService(LevelRepositoryJSON(path))

    assert service.get_level_count() == 3
    assert service.get_first_level_id() == 1
    assert service.get_next_level_id() is None

    service.load_level(2)
    assert service.get_current_level_index() == 2
    assert service.get_next_level_id() == 3
    service.load_level(3)
    assert not service.has_next_level()

    with pytest.raises(ValueError):
        service.load_level(42)
    assert service.get_current_level_id() == 3
