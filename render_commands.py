# -*- coding: utf-8 -*-
########################
# render_commands.py
########################
# Purpose:
# - Rendering surface consumed by the gameplay core.
# - Gameplay code records draw commands into a FrameCanvas; the host replays them onto real pixels.
#
# Design notes:
# - No Qt usage. The Qt host implements TextMeasurer and replays the commands in game_window.py.
# - Sprites are drawn centered on (x, y). Text is drawn with (x, y) as left edge and baseline.
# - Rotation is in radians, clockwise on screen because y grows downward.
#
########################
# Interfaces:
# Public enums:
# - FontRole: TITLE | BODY | MESSAGE | SCORE | SCORE_MESSAGE (point_size property)
#
# Public dataclasses:
# - SpriteCommand(sprite_id: str, x: float, y: float, rotation: float = 0.0)
# - TextCommand(font: FontRole, text: str, x: float, y: float)
#
# Public protocols:
# - TextMeasurer.measure_text_width(font: FontRole, text: str) -> float
#
# Public classes:
# - MonospaceTextMeasurer (headless measurer for tests and --check-levels)
# - FrameCanvas
#   - draw_sprite(sprite_id, x, y, rotation=0.0) -> None
#   - draw_text(font, text, x, y) -> None
#   - draw_text_centered(font, text, y, *, center_x=None) -> None
#   - measure_text_width(font, text) -> float
#   - window_size() -> tuple[int, int]
#   - commands() -> list[RenderCommand]
#
########################

from __future__ import annotations

from dataclasses import dataclass
import enum
from typing import List, Optional, Protocol, Tuple, Union


class FontRole(enum.Enum):
    TITLE = "title"
    BODY = "body"
    MESSAGE = "message"
    SCORE = "score"
    SCORE_MESSAGE = "score_message"

    @property
    def point_size(self) -> int:
        return _POINT_SIZES[self]


_POINT_SIZES = {
    FontRole.TITLE: 64,
    FontRole.BODY: 24,
    FontRole.MESSAGE: 64,
    FontRole.SCORE: 30,
    FontRole.SCORE_MESSAGE: 40,
}


@dataclass(frozen=True)
class SpriteCommand:
    sprite_id: str
    x: float
    y: float
    rotation: float = 0.0


@dataclass(frozen=True)
class TextCommand:
    font: FontRole
    text: str
    x: float
    y: float


RenderCommand = Union[SpriteCommand, TextCommand]


class TextMeasurer(Protocol):
    def measure_text_width(self, font: FontRole, text: str) -> float:
        ...


class MonospaceTextMeasurer:
    """Fixed advance per character. Good enough for layout outside Qt."""

    def __init__(self, advance_ratio: float = 0.6) -> None:
        self._advance_ratio = float(advance_ratio)

    def measure_text_width(self, font: FontRole, text: str) -> float:
        return float(len(text)) * float(font.point_size) * self._advance_ratio


class FrameCanvas:
    def __init__(self, measurer: TextMeasurer, width: int, height: int) -> None:
        self._measurer = measurer
        self._width = int(width)
        self._height = int(height)
        self._commands: List[RenderCommand] = []

    def window_size(self) -> Tuple[int, int]:
        return (self._width, self._height)

    def measure_text_width(self, font: FontRole, text: str) -> float:
        return float(self._measurer.measure_text_width(font, text))

    def draw_sprite(self, sprite_id: str, x: float, y: float, rotation: float = 0.0) -> None:
        self._commands.append(SpriteCommand(str(sprite_id), float(x), float(y), float(rotation)))

    def draw_text(self, font: FontRole, text: str, x: float, y: float) -> None:
        self._commands.append(TextCommand(font, str(text), float(x), float(y)))

    def draw_text_centered(self, font: FontRole, text: str, y: float, *, center_x: Optional[float] = None) -> None:
        middle = float(self._width) / 2.0 if center_x is None else float(center_x)
        self.draw_text(font, text, middle - self.measure_text_width(font, text) / 2.0, y)

    def commands(self) -> List[RenderCommand]:
        return list(self._commands)

    def sprite_commands(self) -> List[SpriteCommand]:
        return [command for command in self._commands if isinstance(command, SpriteCommand)]

    def text_commands(self) -> List[TextCommand]:
        return [command for command in self._commands if isinstance(command, TextCommand)]
