# -*- coding: utf-8 -*-
########################
# level_loader.py
########################
# Purpose:
# - Level file reading only.
# - Turns the comma separated level rows into an immutable LevelChart (lane table + note rows in file order).
#
########################
# Key Logic:
# - Row shapes (fields are whitespace trimmed):
#   - Lane,<laneName>,<xPosition>
#   - <laneName>,<NoteType>,<spawnFrame>
# - NoteType Normal, Hold and Bomb keep their lane.
# - Any other NoteType is a Special note in the Special lane; the type string is its subtype.
#   DoubleScore on disk is stored as the internal "2x" subtype.
# - Lanes are resolved after the whole file is read. A note naming an undeclared lane is fatal.
# - Malformed rows are skipped with a warning, or raised when strict.
# - Note order is file order. The LOSE rule depends on it, so it is never sorted.
#
########################
# Interfaces:
# Public exceptions:
# - class LevelConfigError(Exception)
# - class ConfigNotFoundError(LevelConfigError)
# - class MalformedRowError(LevelConfigError)
#
# Public dataclasses:
# - NoteSpec(kind: NoteKind, lane: str, spawn_frame: int, subtype: str)
# - LevelChart(lanes: tuple[tuple[str, int], ...], notes: tuple[NoteSpec, ...], source: str, skipped_rows: int)
#
# Public functions:
# - parse_level_text(text: str, *, source: str = "<memory>", strict: bool = False) -> LevelChart
# - load_level_file(level_path: Path, *, strict: bool = False) -> LevelChart
# - load_level_set(level_paths: dict[int, Path], *, strict: bool = False) -> dict[int, LevelChart]
#
# Inputs:
# - Level file paths resolved from config.
#
# Outputs:
# - LevelChart objects consumed by game_session when a level is selected.
#
########################
# Smoke Tests:
#   - python level_loader.py levels/level1.csv
########################

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path
import sys
from typing import Dict, List, Optional, Tuple

import game_models
from lane_registry import LaneNotFoundError

logger = logging.getLogger(__name__)

LANE_ROW_TAG = "Lane"
_LANE_NOTE_KINDS = {
    "Normal": game_models.NoteKind.NORMAL,
    "Hold": game_models.NoteKind.HOLD,
    "Bomb": game_models.NoteKind.BOMB,
}


class LevelConfigError(Exception):
    """Base class for level file problems. All of them are fatal at startup."""


class ConfigNotFoundError(LevelConfigError):
    """Raised when a level file is missing or unreadable."""


class MalformedRowError(LevelConfigError):
    """Raised in strict mode when a row matches neither row shape."""

    def __init__(self, source: str, line_number: int, line_text: str, reason: str) -> None:
        super().__init__(f"{source}:{line_number}: {reason}: {line_text!r}")
        self.source = source
        self.line_number = line_number
        self.line_text = line_text
        self.reason = reason


@dataclass(frozen=True)
class NoteSpec:
    kind: game_models.NoteKind
    lane: str
    spawn_frame: int
    subtype: str = ""


@dataclass(frozen=True)
class LevelChart:
    lanes: Tuple[Tuple[str, int], ...]
    notes: Tuple[NoteSpec, ...]
    source: str = "<memory>"
    skipped_rows: int = 0

    def lane_names(self) -> List[str]:
        return [name for name, _x in self.lanes]


def _parse_int_field(value_text: str) -> Optional[int]:
    try:
        return int(value_text)
    except ValueError:
        return None


def _split_row(line_text: str) -> Optional[Tuple[str, str, str]]:
    parts = [part.strip() for part in line_text.split(",")]
    if len(parts) != 3:
        return None
    first, second, third = parts
    if not first or not second or not third:
        return None
    return first, second, third


def _note_spec_from_fields(lane_name: str, type_text: str, spawn_frame: int) -> NoteSpec:
    kind = _LANE_NOTE_KINDS.get(type_text)
    if kind is not None:
        return NoteSpec(kind=kind, lane=lane_name, spawn_frame=spawn_frame)

    subtype = game_models.SPECIAL_DOUBLE_SCORE if type_text == game_models.DOUBLE_SCORE_FILE_ALIAS else type_text
    return NoteSpec(
        kind=game_models.NoteKind.SPECIAL,
        lane=game_models.SPECIAL_LANE,
        spawn_frame=spawn_frame,
        subtype=subtype,
    )


def parse_level_text(text: str, *, source: str = "<memory>", strict: bool = False) -> LevelChart:
    lanes: Dict[str, int] = {}
    notes: List[NoteSpec] = []
    skipped_rows = 0

    def reject(line_number: int, line_text: str, reason: str) -> None:
        nonlocal skipped_rows
        if strict:
            raise MalformedRowError(source, line_number, line_text, reason)
        skipped_rows += 1
        logger.warning("Skipping row %s:%d (%s): %r", source, line_number, reason, line_text)

    for line_number, raw_line in enumerate(str(text).splitlines(), start=1):
        line_text = raw_line.strip()
        if not line_text:
            continue

        fields = _split_row(line_text)
        if fields is None:
            reject(line_number, line_text, "expected 3 non-empty comma separated fields")
            continue

        first, second, third = fields
        number = _parse_int_field(third)
        if number is None:
            reject(line_number, line_text, "third field must be an integer")
            continue

        if first == LANE_ROW_TAG:
            lanes[second] = number
            continue

        note = _note_spec_from_fields(first, second, number)
        if note.kind is game_models.NoteKind.SPECIAL and note.subtype not in game_models.KNOWN_SPECIAL_SUBTYPES:
            logger.warning("Unknown special note type %r at %s:%d, it will have no effect", note.subtype, source, line_number)
        notes.append(note)

    for note in notes:
        if note.lane not in lanes:
            raise LaneNotFoundError(note.lane)

    chart = LevelChart(
        lanes=tuple(lanes.items()),
        notes=tuple(notes),
        source=str(source),
        skipped_rows=skipped_rows,
    )
    logger.info("Loaded level %s: %d lanes, %d notes, %d skipped rows", source, len(chart.lanes), len(chart.notes), skipped_rows)
    return chart


def load_level_file(level_path: Path, *, strict: bool = False) -> LevelChart:
    resolved_path = Path(level_path)
    try:
        text = resolved_path.read_text(encoding="utf-8")
    except FileNotFoundError as exception:
        raise ConfigNotFoundError(f"Level file not found: {resolved_path}") from exception
    except (OSError, UnicodeDecodeError) as exception:
        raise ConfigNotFoundError(f"Failed to read level file: {resolved_path}. Error: {exception}") from exception
    return parse_level_text(text, source=str(resolved_path), strict=strict)


def load_level_set(level_paths: Dict[int, Path], *, strict: bool = False) -> Dict[int, LevelChart]:
    return {int(level): load_level_file(path, strict=strict) for level, path in sorted(level_paths.items())}


def _run_unit_tests() -> None:
    chart = parse_level_text(
        "Lane,Left,364\nLane,Special,964\nLeft,Normal,10\nLeft,DoubleScore,20\nbroken row\n",
        source="inline",
    )
    assert chart.lanes == (("Left", 364), ("Special", 964))
    assert [note.kind for note in chart.notes] == [game_models.NoteKind.NORMAL, game_models.NoteKind.SPECIAL]
    assert chart.notes[1].subtype == "2x"
    assert chart.notes[1].lane == "Special"
    assert chart.skipped_rows == 1

    try:
        parse_level_text("Down,Normal,1\n")
    except LaneNotFoundError:
        pass
    else:
        raise AssertionError("expected LaneNotFoundError")


def main(argv: Optional[List[str]] = None) -> int:
    arguments = list(sys.argv[1:] if argv is None else argv)
    if not arguments:
        _run_unit_tests()
        print("level_loader.py: ok")
        return 0

    try:
        chart = load_level_file(Path(arguments[0]))
    except (LevelConfigError, LaneNotFoundError) as exception:
        print(json.dumps({"ok": False, "error": str(exception)}, ensure_ascii=False, indent=2))
        return 2

    payload = {
        "ok": True,
        "source": chart.source,
        "lanes": dict(chart.lanes),
        "notes": len(chart.notes),
        "skipped_rows": chart.skipped_rows,
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
