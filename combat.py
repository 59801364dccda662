# -*- coding: utf-8 -*-
########################
# combat.py
########################
# Purpose:
# - Level 3 combat layer: roaming enemies that steal notes, a stationary guardian, and its arrows.
#
########################
# Key Logic:
# - Enemies:
#   - one spawns whenever frame_count is a multiple of 600
#   - random start in [100, 1000) x [100, 600), random direction -1 or +1
#   - move 1 px per frame horizontally, turning around past x = 100 and x = 900
#   - every frame, each live enemy marks eligible Normal notes within 104 px as not alive
# - Guardian:
#   - fixed at (800, 600)
#   - on a fire press, aims at the nearest live enemy; ties keep the earliest spawned enemy
# - Arrows:
#   - heading frozen at spawn, 6 px per frame, no homing
#   - first live enemy (spawn order) within 62 px eliminates both arrow and enemy
#   - leaves play when outside the window
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Nothing is removed from the enemy or arrow lists; fired flags mark elimination.
# - Randomness comes from the session Random so games can be replayed from a seed.
#
########################
# Interfaces:
# Public dataclasses:
# - Enemy(x: int, y: int, direction: int, fired: bool = False)
# - Arrow(x: float, y: float, rotation: float, fired: bool = False)
#
# Public classes:
# - class Guardian
#   - find_nearest_enemy(enemies: Iterable[Enemy]) -> Optional[Enemy]
#   - fire(enemies: Iterable[Enemy]) -> Optional[Arrow]
# - class CombatSubsystem
#   - enemies() -> list[Enemy]
#   - arrows() -> list[Arrow]
#   - add_enemy(enemy: Enemy) -> None
#   - advance_enemies(session, canvas) -> None
#   - update_guardian(session, snapshot, canvas) -> None
#   - advance_arrows(session, canvas) -> None
#
########################

from __future__ import annotations

from dataclasses import dataclass
import logging
import random
from typing import TYPE_CHECKING, Iterable, List, Optional

import game_models
from geometry import distance, heading, is_outside, step_along
from render_commands import FrameCanvas

if TYPE_CHECKING:
    from game_session import GameSession

logger = logging.getLogger(__name__)

ENEMY_SPAWN_INTERVAL_FRAMES = 600
ENEMY_STEAL_DISTANCE = 104
ENEMY_MIN_X = 100
ENEMY_MAX_X = 900
GUARDIAN_X = 800
GUARDIAN_Y = 600
ARROW_SPEED = 6.0
ARROW_HIT_DISTANCE = 62
# Larger than any on-screen distance.
_NO_ENEMY_DISTANCE = 10000.0


@dataclass
class Enemy:
    x: int
    y: int
    direction: int = 1
    # Set once an arrow eliminates the enemy.
    fired: bool = False

    @classmethod
    def spawn(cls, rng: random.Random) -> "Enemy":
        x = rng.randrange(100, 1000)
        y = rng.randrange(100, 600)
        direction = rng.choice((-1, 1))
        return cls(x=x, y=y, direction=direction)

    def step(self) -> None:
        if self.x < ENEMY_MIN_X:
            self.direction = 1
        elif self.x > ENEMY_MAX_X:
            self.direction = -1
        self.x += self.direction


@dataclass
class Arrow:
    x: float = float(GUARDIAN_X)
    y: float = float(GUARDIAN_Y)
    rotation: float = 0.0
    # Set once the arrow hits an enemy or leaves the window.
    fired: bool = False

    def step(self) -> None:
        self.x, self.y = step_along(self.x, self.y, self.rotation, ARROW_SPEED)


class Guardian:
    def __init__(self, x: int = GUARDIAN_X, y: int = GUARDIAN_Y) -> None:
        self.x = int(x)
        self.y = int(y)

    def find_nearest_enemy(self, enemies: Iterable[Enemy]) -> Optional[Enemy]:
        nearest: Optional[Enemy] = None
        nearest_distance = _NO_ENEMY_DISTANCE
        for enemy in enemies:
            if enemy.fired:
                continue
            candidate_distance = distance(enemy.x, enemy.y, self.x, self.y)
            # Strict comparison keeps the first enemy on ties.
            if candidate_distance < nearest_distance:
                nearest = enemy
                nearest_distance = candidate_distance
        return nearest

    def fire(self, enemies: Iterable[Enemy]) -> Optional[Arrow]:
        target = self.find_nearest_enemy(enemies)
        if target is None:
            return None
        return Arrow(
            x=float(self.x),
            y=float(self.y),
            rotation=heading(self.x, self.y, target.x, target.y),
        )


class CombatSubsystem:
    def __init__(self, rng: random.Random, guardian: Optional[Guardian] = None) -> None:
        self._rng = rng
        self.guardian = guardian or Guardian()
        self._enemies: List[Enemy] = []
        self._arrows: List[Arrow] = []

    def enemies(self) -> List[Enemy]:
        return list(self._enemies)

    def arrows(self) -> List[Arrow]:
        return list(self._arrows)

    def add_enemy(self, enemy: Enemy) -> None:
        self._enemies.append(enemy)

    def advance_enemies(self, session: "GameSession", canvas: FrameCanvas) -> None:
        if session.frame_count % ENEMY_SPAWN_INTERVAL_FRAMES == 0:
            enemy = Enemy.spawn(self._rng)
            self._enemies.append(enemy)
            logger.debug("Enemy spawned at (%d, %d) on frame %d", enemy.x, enemy.y, session.frame_count)

        for enemy in self._enemies:
            if enemy.fired:
                continue
            canvas.draw_sprite("enemy", enemy.x, enemy.y)
            enemy.step()
            self._steal_notes(enemy, session)

    def _steal_notes(self, enemy: Enemy, session: "GameSession") -> None:
        for note in session.timeline.eligible_notes(session.frame_count, session.window_height):
            if note.kind is not game_models.NoteKind.NORMAL or not note.alive:
                continue
            if distance(note.x, note.y, enemy.x, enemy.y) <= ENEMY_STEAL_DISTANCE:
                note.alive = False

    def update_guardian(self, session: "GameSession", snapshot: game_models.InputSnapshot, canvas: FrameCanvas) -> None:
        if snapshot.was_pressed(game_models.Action.FIRE):
            arrow = self.guardian.fire(self._enemies)
            if arrow is not None:
                self._arrows.append(arrow)
        canvas.draw_sprite("guardian", self.guardian.x, self.guardian.y)

    def advance_arrows(self, session: "GameSession", canvas: FrameCanvas) -> None:
        for arrow in self._arrows:
            if arrow.fired:
                continue
            canvas.draw_sprite("arrow", arrow.x, arrow.y, arrow.rotation)
            arrow.step()

            for enemy in self._enemies:
                if not enemy.fired and distance(enemy.x, enemy.y, arrow.x, arrow.y) <= ARROW_HIT_DISTANCE:
                    arrow.fired = True
                    enemy.fired = True
                    logger.debug("Arrow hit enemy at (%d, %d) on frame %d", enemy.x, enemy.y, session.frame_count)
                    break

            if is_outside(arrow.x, arrow.y, session.window_width, session.window_height):
                arrow.fired = True
