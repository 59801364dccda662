from __future__ import annotations

import pytest

from game_session import GameSession, new_session
from level_loader import parse_level_text
from render_commands import FrameCanvas, MonospaceTextMeasurer

FIVE_LANES = "Lane,Left,364\nLane,Down,514\nLane,Up,664\nLane,Right,814\nLane,Special,964\n"


@pytest.fixture
def make_session():
    """Build a session that is already playing the given level rows."""

    def factory(rows: str = "", *, level: int = 1, scroll_speed: int = 4, seed: int = 0, lanes: str = FIVE_LANES) -> GameSession:
        session = new_session(scroll_speed=scroll_speed, seed=seed)
        chart = parse_level_text(lanes + rows, source="test")
        session.start_level(level, chart)
        return session

    return factory


@pytest.fixture
def canvas() -> FrameCanvas:
    return FrameCanvas(MonospaceTextMeasurer(), 1024, 768)
