# -*- coding: utf-8 -*-
########################
# game_window.py
########################
# Purpose:
# - Qt host for the game: owns the frame timer, routes keyboard input, and paints each frame.
# - Integrates InputRouter + GameStateMachine + SpriteAtlas.
#
########################
# Key Logic:
# - Frame loop:
#   - QTimer fires every 1000 / fps ms
#   - InputRouter.take_snapshot() -> GameStateMachine.advance_frame(snapshot) -> FrameResult
#   - the FrameResult commands are kept and replayed in the next paintEvent
#   - quit_requested closes the window
# - Painting:
#   - the playfield is laid out in logical window pixels and scaled to the widget size
#   - SpriteCommand -> SpriteAtlas.draw (centered, rotated)
#   - TextCommand -> QPainter.drawText at (x, baseline y) with the font for its FontRole
# - Focus loss clears pressed keys so no key stays stuck down.
#
# Design notes:
# - All game rules live in game_state_machine.py and below. This module only moves events and pixels.
#
########################
# Interfaces:
# Public classes:
# - class QtTextMeasurer
#   - measure_text_width(font: FontRole, text: str) -> float
#   - qfont(font: FontRole) -> QFont
# - class GameWindow(PyQt6.QtWidgets.QWidget)
#   - Signals:
#     - frameAdvanced(game_state_machine.FrameResult)
#   - start() -> None
#   - stop() -> None
#   - advance_one_frame() -> FrameResult
#
# Public functions:
# - register_font(font_path: pathlib.Path) -> Optional[str]
#
########################

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from PyQt6.QtCore import QEvent, QPointF, Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QColor, QFont, QFontDatabase, QFontMetricsF, QKeyEvent, QPainter, QPen
from PyQt6.QtWidgets import QWidget

from game_state_machine import FrameResult, GameStateMachine
from input_router import InputRouter
from render_commands import FontRole, RenderCommand, SpriteCommand, TextCommand
from sprite_atlas import SpriteAtlas

logger = logging.getLogger(__name__)

_FALLBACK_FONT_FAMILY = "Monospace"
_TEXT_COLOR = QColor(240, 240, 240)


def register_font(font_path: Path) -> Optional[str]:
    """Register a font file with Qt and return its family name, or None when unavailable."""
    if not Path(font_path).exists():
        logger.info("Font file %s not found, using %s", font_path, _FALLBACK_FONT_FAMILY)
        return None

    font_id = QFontDatabase.addApplicationFont(str(font_path))
    if font_id < 0:
        logger.warning("Qt rejected font file %s", font_path)
        return None

    families = QFontDatabase.applicationFontFamilies(font_id)
    if not families:
        return None
    return str(families[0])


class QtTextMeasurer:
    def __init__(self, font_family: Optional[str] = None) -> None:
        self._font_family = font_family or _FALLBACK_FONT_FAMILY
        self._fonts: Dict[FontRole, QFont] = {}
        self._metrics: Dict[FontRole, QFontMetricsF] = {}

    def qfont(self, font: FontRole) -> QFont:
        cached_font = self._fonts.get(font)
        if cached_font is not None:
            return cached_font
        qt_font = QFont(self._font_family)
        qt_font.setPointSize(int(font.point_size))
        self._fonts[font] = qt_font
        return qt_font

    def measure_text_width(self, font: FontRole, text: str) -> float:
        metrics = self._metrics.get(font)
        if metrics is None:
            metrics = QFontMetricsF(self.qfont(font))
            self._metrics[font] = metrics
        return float(metrics.horizontalAdvance(str(text)))


class GameWindow(QWidget):
    frameAdvanced = pyqtSignal(object)

    def __init__(
        self,
        *,
        machine: GameStateMachine,
        router: InputRouter,
        atlas: SpriteAtlas,
        measurer: QtTextMeasurer,
        fps: int = 60,
        logical_width: int = 1024,
        logical_height: int = 768,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._machine = machine
        self._router = router
        self._atlas = atlas
        self._measurer = measurer
        self._logical_width = int(logical_width)
        self._logical_height = int(logical_height)

        self._commands: List[RenderCommand] = []

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.resize(self._logical_width, self._logical_height)

        self._frame_timer = QTimer(self)
        self._frame_timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._frame_timer.setInterval(max(1, int(round(1000.0 / float(fps)))))
        self._frame_timer.timeout.connect(self._on_frame_timer)

    # -----------------
    # Frame loop
    # -----------------

    def start(self) -> None:
        self._frame_timer.start()

    def stop(self) -> None:
        self._frame_timer.stop()

    def advance_one_frame(self) -> FrameResult:
        snapshot = self._router.take_snapshot()
        result = self._machine.advance_frame(snapshot)
        self._commands = list(result.commands)
        self.frameAdvanced.emit(result)
        return result

    def _on_frame_timer(self) -> None:
        result = self.advance_one_frame()
        if result.quit_requested:
            logger.info("Quit requested on frame %d", result.frame_count)
            self.stop()
            self.close()
            return
        self.update()

    # -----------------
    # Keyboard and focus
    # -----------------

    def keyPressEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        if not self._router.handle_key_press(event):
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        if not self._router.handle_key_release(event):
            super().keyReleaseEvent(event)

    def focusOutEvent(self, event) -> None:  # noqa: N802
        self._router.clear_pressed_keys()
        super().focusOutEvent(event)

    def changeEvent(self, event) -> None:  # noqa: N802
        if event.type() == QEvent.Type.ActivationChange and not self.isActiveWindow():
            self._router.clear_pressed_keys()
        super().changeEvent(event)

    def closeEvent(self, event) -> None:  # noqa: N802
        self.stop()
        super().closeEvent(event)

    # -----------------
    # Painting
    # -----------------

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)

        painter.scale(
            float(self.width()) / float(self._logical_width),
            float(self.height()) / float(self._logical_height),
        )

        for command in self._commands:
            if isinstance(command, SpriteCommand):
                self._atlas.draw(painter, command.sprite_id, QPointF(command.x, command.y), command.rotation)
            elif isinstance(command, TextCommand):
                self._paint_text(painter, command)

        painter.end()

    def _paint_text(self, painter: QPainter, command: TextCommand) -> None:
        if not command.text:
            return
        painter.save()
        painter.setPen(QPen(_TEXT_COLOR))
        painter.setFont(self._measurer.qfont(command.font))
        painter.drawText(QPointF(float(command.x), float(command.y)), command.text)
        painter.restore()
