# -*- coding: utf-8 -*-
########################
# game_session.py
########################
# Purpose:
# - Context object for one game: state, level, frame counter, scroll speed, and the level collections.
#
# Design notes:
# - No Qt usage.
# - Passed explicitly to every per-frame update. Nothing gameplay related lives in module globals.
# - A restart replaces the whole session. Sessions never share collections.
#
########################
# Interfaces:
# Public dataclasses:
# - GameSession(state, level, frame_count, scroll_speed, window_width, window_height,
#               lanes, scoring, timeline, combat, rng)
#   - start_level(level: int, chart: LevelChart) -> None
#
# Public functions:
# - new_session(*, scroll_speed: int, window_width: int, window_height: int, seed: Optional[int]) -> GameSession
#
########################

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import random
from typing import Optional

import game_models
from combat import CombatSubsystem
from lane_registry import LaneRegistry
from level_loader import LevelChart
from note_timeline import NoteTimeline
from scoring import ScoringEngine

logger = logging.getLogger(__name__)

COMBAT_LEVEL = 3


@dataclass
class GameSession:
    state: game_models.GameState = game_models.GameState.START
    level: int = 1
    frame_count: int = 0
    scroll_speed: int = 4
    window_width: int = 1024
    window_height: int = 768
    lanes: LaneRegistry = field(default_factory=LaneRegistry)
    scoring: ScoringEngine = field(default_factory=ScoringEngine)
    timeline: NoteTimeline = field(default_factory=NoteTimeline)
    combat: Optional[CombatSubsystem] = None
    rng: random.Random = field(default_factory=random.Random)

    def start_level(self, level: int, chart: LevelChart) -> None:
        lanes = LaneRegistry()
        for name, x in chart.lanes:
            lanes.set_position(name, x)

        self.level = int(level)
        self.lanes = lanes
        self.timeline = NoteTimeline.from_chart(chart, lanes)
        self.combat = CombatSubsystem(self.rng) if self.level == COMBAT_LEVEL else None
        self.frame_count = 0
        self.state = game_models.GameState.PLAY
        logger.info("Level %d started from %s (%d notes)", self.level, chart.source, len(self.timeline))


def new_session(
    *,
    scroll_speed: int = 4,
    window_width: int = 1024,
    window_height: int = 768,
    seed: Optional[int] = None,
) -> GameSession:
    return GameSession(
        scroll_speed=int(scroll_speed),
        window_width=int(window_width),
        window_height=int(window_height),
        rng=random.Random(seed),
    )
