from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple

DEFAULT_WIDTH = 7
DEFAULT_HEIGHT = 8
DEFAULT_PALETTE: Tuple[str, ...] = ("red", "blue", "green", "yellow")


class BlockerType(Enum):
    STONE = "stone"
    ICE = "ice"
    LOCKED = "locked"


@dataclass(frozen=True)
class BlockerDefinition:
    type: BlockerType
    x: int
    y: int
    ice_layer: int = 0
    locked: bool = False
    color: Optional[str] = None  # Renkli buz/kilit; None ise dekorasyon kabuğu

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "BlockerDefinition":
        if not isinstance(data, dict):
            raise TypeError(f"Engel kaydı bir nesne olmalı: {data!r}")
        color = data.get("color")
        return BlockerDefinition(
            type=BlockerType(str(data["type"]).lower()),
            x=int(data["x"]),
            y=int(data["y"]),
            ice_layer=int(data.get("iceLayer", data.get("ice_layer", 0)) or 0),
            locked=bool(data.get("locked", False)),
            color=color.lower() if color else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type.value, "x": self.x, "y": self.y}
        if self.ice_layer:
            data["iceLayer"] = self.ice_layer
        if self.locked:
            data["locked"] = True
        if self.color:
            data["color"] = self.color
        return data


def _point(value: Any, default: Tuple[int, int]) -> Tuple[int, int]:
    """{x, y} dict'ini veya [x, y] listesini (x, y) tuple'ına çevirir."""
    if value is None:
        return default
    if isinstance(value, dict):
        return (int(value["x"]), int(value["y"]))
    x, y = value
    return (int(x), int(y))


@dataclass(frozen=True)
class LevelDefinition:
    """
    Bir level'in değişmez ayarları. Harici loader tarafından üretilir,
    Grid ve CharacterController bunu sadece okur.
    """

    id: int
    name: str
    width: int
    height: int
    max_moves: int
    character_start: Tuple[int, int]
    exit_position: Tuple[int, int]
    blockers: Tuple[BlockerDefinition, ...] = field(default_factory=tuple)
    palette: Tuple[str, ...] = DEFAULT_PALETTE

    @staticmethod
    def from_dict(data: dict[str, Any], default_max_moves: int = 20) -> "LevelDefinition":
        width = int(data.get("width", data.get("gridWidth", DEFAULT_WIDTH)))
        height = int(data.get("height", data.get("gridHeight", DEFAULT_HEIGHT)))
        palette = data.get("palette", data.get("tileTypes", DEFAULT_PALETTE))
        return LevelDefinition(
            id=int(data["id"]),
            name=str(data.get("name", f"Level {data['id']}")),
            width=width,
            height=height,
            max_moves=int(data.get("maxMoves", data.get("max_moves", default_max_moves))),
            character_start=_point(
                data.get("characterStart", data.get("character_start")),
                (width // 2, height - 1),
            ),
            exit_position=_point(
                data.get("exitPosition", data.get("exit_position")),
                (width // 2, 0),
            ),
            blockers=tuple(BlockerDefinition.from_dict(item) for item in data.get("blockers", [])),
            palette=tuple(str(color).lower() for color in palette),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "gridWidth": self.width,
            "gridHeight": self.height,
            "maxMoves": self.max_moves,
            "characterStart": {"x": self.character_start[0], "y": self.character_start[1]},
            "exitPosition": {"x": self.exit_position[0], "y": self.exit_position[1]},
            "blockers": [blocker.to_dict() for blocker in self.blockers],
            "tileTypes": list(self.palette),
        }

    @property
    def exit_row(self) -> int:
        return self.exit_position[1]
