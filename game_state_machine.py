# -*- coding: utf-8 -*-
########################
# game_state_machine.py
########################
# Purpose:
# - Top level per-frame driver: START (level picker) -> PLAY -> WIN | LOSE, and LOSE -> START on confirm.
# - advance_frame(snapshot) is the only entry point the host calls, exactly once per rendered frame.
#
########################
# Key Logic:
# - Frame order is fixed:
#   1) background
#   2) quit check (returns at once)
#   3) state screen and transitions (level select, HUD, WIN / LOSE text, restart)
#   4) frame counter increment
#   5) gameplay update while PLAY: lanes, enemies, score timers, notes, LOSE check, guardian, arrows
# - Level select resets the frame counter and builds fresh lanes and notes from that level's chart.
# - Restart from LOSE replaces the session wholesale.
# - WIN has no exit except quitting.
#
# Design notes:
# - No Qt usage. Rendering goes through FrameCanvas commands and a TextMeasurer.
# - All level charts are parsed before the first frame, so configuration errors never surface mid game.
#
########################
# Interfaces:
# Public dataclasses:
# - FrameResult(commands, state, level, frame_count, grades, quit_requested)
#
# Public classes:
# - class GameStateMachine
#   - __init__(charts: dict[int, LevelChart], *, measurer, window_width, window_height, base_scroll_speed, seed)
#   - session -> GameSession
#   - new_game() -> GameSession
#   - advance_frame(snapshot: InputSnapshot) -> FrameResult
#
# Inputs:
# - One InputSnapshot per frame from InputRouter (or tests).
#
# Outputs:
# - FrameResult with the draw commands for the host to replay.
#
########################

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Dict, List, Optional

import game_models
from game_session import GameSession, new_session
from level_loader import LevelChart
from render_commands import FontRole, FrameCanvas, MonospaceTextMeasurer, RenderCommand, TextMeasurer
from scoring import GradeEvent

logger = logging.getLogger(__name__)

LANE_Y = 384
SCORE_X = 35
SCORE_Y = 35
LOSE_PROMPT_Y = 500


@dataclass(frozen=True)
class FrameResult:
    commands: List[RenderCommand]
    state: game_models.GameState
    level: int
    frame_count: int
    grades: List[GradeEvent] = field(default_factory=list)
    quit_requested: bool = False


class GameStateMachine:
    def __init__(
        self,
        charts: Dict[int, LevelChart],
        *,
        measurer: Optional[TextMeasurer] = None,
        window_width: int = 1024,
        window_height: int = 768,
        base_scroll_speed: int = 4,
        seed: Optional[int] = None,
    ) -> None:
        self._charts: Dict[int, LevelChart] = {int(level): chart for level, chart in charts.items()}
        self._measurer: TextMeasurer = measurer or MonospaceTextMeasurer()
        self._window_width = int(window_width)
        self._window_height = int(window_height)
        self._base_scroll_speed = int(base_scroll_speed)
        self._seed = seed
        self._session = self.new_game()

    @property
    def session(self) -> GameSession:
        return self._session

    def new_game(self) -> GameSession:
        self._session = new_session(
            scroll_speed=self._base_scroll_speed,
            window_width=self._window_width,
            window_height=self._window_height,
            seed=self._seed,
        )
        return self._session

    def advance_frame(self, snapshot: game_models.InputSnapshot) -> FrameResult:
        canvas = FrameCanvas(self._measurer, self._window_width, self._window_height)
        canvas.draw_sprite("background", self._window_width / 2.0, self._window_height / 2.0)

        if snapshot.was_pressed(game_models.Action.QUIT):
            session = self._session
            return FrameResult(
                commands=canvas.commands(),
                state=session.state,
                level=session.level,
                frame_count=session.frame_count,
                quit_requested=True,
            )

        self._dispatch_state(snapshot, canvas)

        session = self._session
        session.frame_count += 1
        if session.state is game_models.GameState.PLAY:
            self._update_gameplay(session, snapshot, canvas)

        grades = session.scoring.recent_grades()
        session.scoring.clear_recent_grades()
        return FrameResult(
            commands=canvas.commands(),
            state=session.state,
            level=session.level,
            frame_count=session.frame_count,
            grades=grades,
        )

    # -----------------
    # State screens
    # -----------------

    def _dispatch_state(self, snapshot: game_models.InputSnapshot, canvas: FrameCanvas) -> None:
        state = self._session.state
        if state is game_models.GameState.START:
            self._handle_start(snapshot, canvas)
        elif state is game_models.GameState.PLAY:
            self._draw_hud(canvas)
        elif state is game_models.GameState.WIN:
            canvas.draw_text_centered(FontRole.MESSAGE, "CLEAR!", self._window_height / 2.0 - 20)
        elif state is game_models.GameState.LOSE:
            self._handle_lose(snapshot, canvas)

    def _handle_start(self, snapshot: game_models.InputSnapshot, canvas: FrameCanvas) -> None:
        level = snapshot.selected_level()
        if level is not None:
            chart = self._charts.get(level)
            if chart is None:
                logger.warning("No level chart loaded for level %d", level)
            else:
                self._session.start_level(level, chart)

        canvas.draw_text(FontRole.TITLE, "SHADOW DANCE", 220, 250 - 64)
        canvas.draw_text(FontRole.BODY, "SELECT LEVELS WITH", 340, 250 - 64 + 190 - 24)
        canvas.draw_text(FontRole.BODY, "NUMBER KEYS", 405, 250 - 64 + 190 - 24 + 40)
        canvas.draw_text(FontRole.BODY, "1 2 3", 465, 250 - 64 + 190 - 24 + 40 + 80)

    def _draw_hud(self, canvas: FrameCanvas) -> None:
        scoring = self._session.scoring
        canvas.draw_text(FontRole.SCORE, f"SCORE {scoring.points}", SCORE_X, SCORE_Y)
        canvas.draw_text_centered(FontRole.SCORE_MESSAGE, scoring.message, self._window_height / 2.0 - 20)

    def _handle_lose(self, snapshot: game_models.InputSnapshot, canvas: FrameCanvas) -> None:
        canvas.draw_text_centered(FontRole.MESSAGE, "TRY AGAIN", self._window_height / 2.0 - 20)
        canvas.draw_text_centered(FontRole.BODY, "PRESS SPACE TO RETURN TO LEVEL SELECTION", LOSE_PROMPT_Y)
        if snapshot.was_pressed(game_models.Action.CONFIRM):
            logger.info("Restarting after loss on level %d", self._session.level)
            self.new_game()

    # -----------------
    # Gameplay update
    # -----------------

    def _update_gameplay(self, session: GameSession, snapshot: game_models.InputSnapshot, canvas: FrameCanvas) -> None:
        for name, x in session.lanes.visible_lanes(session.level):
            canvas.draw_sprite("lane" + name, x, LANE_Y)

        if session.combat is not None:
            session.combat.advance_enemies(session, canvas)

        session.scoring.tick()
        session.timeline.advance(session, snapshot, canvas)

        if session.combat is not None:
            session.combat.update_guardian(session, snapshot, canvas)
            session.combat.advance_arrows(session, canvas)
