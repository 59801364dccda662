# -*- coding: utf-8 -*-
########################
# sprite_atlas.py
########################
# Purpose:
# - Sprite loader and renderer for the game window.
# - Maps sprite ids from SpriteCommand to <assets_dir>/<sprite id>.png and draws them centered into a QPainter.
#
# Design notes:
# - Keep asset lookup and caching internal to avoid leaking file layout to other modules.
# - Missing images are not an error. A flat placeholder shape is drawn instead so the game stays playable
#   from a bare checkout.
# - Rotation arrives in radians from the gameplay core and is converted to degrees for QPainter.
#
########################
# Interfaces:
# Public classes:
# - class SpriteAtlas
#   - assets_dir() -> pathlib.Path
#   - sprite_path(sprite_id: str) -> pathlib.Path
#   - has_image(sprite_id: str) -> bool
#   - draw(painter: QPainter, sprite_id: str, center: QPointF, rotation_radians: float = 0.0) -> None
#
# Inputs:
# - QPainter drawing target and SpriteCommand fields.
#
# Outputs:
# - Rendered sprites on the provided painter.
#
########################

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Dict, Set, Tuple

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QPainter, QPixmap

logger = logging.getLogger(__name__)

# Placeholder (width, height, color) chosen by sprite id prefix.
_PLACEHOLDER_STYLES: Tuple[Tuple[str, Tuple[float, float, QColor]], ...] = (
    ("lane", (80.0, 768.0, QColor(40, 40, 56))),
    ("holdNote", (60.0, 164.0, QColor(90, 200, 255))),
    ("noteBomb", (56.0, 56.0, QColor(230, 60, 60))),
    ("noteSpeedUp", (56.0, 56.0, QColor(120, 240, 120))),
    ("noteSlowDown", (56.0, 56.0, QColor(240, 200, 80))),
    ("note2x", (56.0, 56.0, QColor(250, 120, 250))),
    ("note", (60.0, 60.0, QColor(70, 180, 240))),
    ("guardian", (70.0, 70.0, QColor(240, 240, 240))),
    ("enemy", (64.0, 64.0, QColor(160, 60, 200))),
    ("arrow", (40.0, 8.0, QColor(255, 220, 120))),
)
_DEFAULT_PLACEHOLDER = (48.0, 48.0, QColor(200, 200, 200))
_BACKGROUND_COLOR = QColor(10, 10, 12)


class SpriteAtlas:
    def __init__(self, assets_dir: Path) -> None:
        self._assets_dir = Path(assets_dir)
        self._pixmap_cache: Dict[str, QPixmap] = {}
        self._reported_missing: Set[str] = set()

    def assets_dir(self) -> Path:
        return self._assets_dir

    def sprite_path(self, sprite_id: str) -> Path:
        return self._assets_dir / f"{sprite_id}.png"

    def _pixmap_for_sprite(self, sprite_id: str) -> QPixmap:
        cached_pixmap = self._pixmap_cache.get(sprite_id)
        if cached_pixmap is not None:
            return cached_pixmap

        file_path = self.sprite_path(sprite_id)
        loaded_pixmap = QPixmap(str(file_path)) if file_path.exists() else QPixmap()
        if loaded_pixmap.isNull() and sprite_id not in self._reported_missing:
            self._reported_missing.add(sprite_id)
            logger.debug("No image for sprite %r at %s, drawing placeholder", sprite_id, file_path)
        self._pixmap_cache[sprite_id] = loaded_pixmap
        return loaded_pixmap

    def has_image(self, sprite_id: str) -> bool:
        return not self._pixmap_for_sprite(sprite_id).isNull()

    def draw(self, painter: QPainter, sprite_id: str, center: QPointF, rotation_radians: float = 0.0) -> None:
        pixmap = self._pixmap_for_sprite(sprite_id)

        painter.save()
        painter.translate(center)
        if rotation_radians:
            painter.rotate(math.degrees(float(rotation_radians)))

        if not pixmap.isNull():
            width_pixels = float(pixmap.width())
            height_pixels = float(pixmap.height())
            target_rect = QRectF(-width_pixels * 0.5, -height_pixels * 0.5, width_pixels, height_pixels)
            painter.drawPixmap(target_rect, pixmap, QRectF(0.0, 0.0, width_pixels, height_pixels))
        elif sprite_id == "background":
            window = painter.window()
            painter.resetTransform()
            painter.fillRect(window, QBrush(_BACKGROUND_COLOR))
        else:
            self._draw_placeholder(painter, sprite_id)

        painter.restore()

    def _draw_placeholder(self, painter: QPainter, sprite_id: str) -> None:
        width_pixels, height_pixels, color = _DEFAULT_PLACEHOLDER
        for prefix, style in _PLACEHOLDER_STYLES:
            if sprite_id.startswith(prefix):
                width_pixels, height_pixels, color = style
                break

        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(color))
        rect = QRectF(-width_pixels * 0.5, -height_pixels * 0.5, width_pixels, height_pixels)
        if sprite_id.startswith(("note", "enemy", "guardian")) and not sprite_id.startswith("noteBomb"):
            painter.drawEllipse(rect)
        else:
            painter.drawRect(rect)
