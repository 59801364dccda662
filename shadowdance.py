"""
shadowdance.py

Real entrypoint that launches the game.

Integration
- Loads config and paths
- Parses every level file before the first frame, so broken levels fail at startup
- Creates QApplication, registers the font and builds the sprite atlas
- Instantiates GameStateMachine, InputRouter and GameWindow and starts the frame timer

Command line overrides win over the config file and the SHADOWDANCE_* environment variables.
--check-levels loads and validates the level files without opening a window.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from config import AppConfig, base_scroll_speed, get_config
from lane_registry import LaneNotFoundError
from level_loader import LevelChart, LevelConfigError, load_level_set
import paths

logger = logging.getLogger("shadowdance")


def _print_error(error_text: str) -> int:
    print(json.dumps({"ok": False, "error": str(error_text)}, ensure_ascii=False, indent=2))
    return 2


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_argument_parser() -> argparse.ArgumentParser:
    argument_parser = argparse.ArgumentParser(description="Shadow Dance rhythm game")
    argument_parser.add_argument("--fullscreen", action="store_true", help="Start in fullscreen.")
    argument_parser.add_argument("--level-dir", default=None, help="Directory holding level1.csv, level2.csv and level3.csv.")
    argument_parser.add_argument("--scroll-speed", type=int, default=None, help="Fixed base scroll speed in px per frame.")
    argument_parser.add_argument("--seed", type=int, default=None, help="Seed for enemy placement.")
    argument_parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    argument_parser.add_argument(
        "--check-levels",
        action="store_true",
        help="Validate the level files, print a JSON summary and exit without opening a window.",
    )
    return argument_parser


def _apply_argument_overrides(app_config: AppConfig, parsed_args: argparse.Namespace) -> AppConfig:
    display_config = app_config.display
    gameplay_config = app_config.gameplay
    levels_config = app_config.levels

    if parsed_args.fullscreen:
        display_config = display_config.model_copy(update={"fullscreen": True})
    if parsed_args.scroll_speed is not None:
        gameplay_config = gameplay_config.model_copy(update={"scroll_speed": int(parsed_args.scroll_speed)})
    if parsed_args.seed is not None:
        gameplay_config = gameplay_config.model_copy(update={"enemy_seed": int(parsed_args.seed)})
    if parsed_args.level_dir:
        levels_config = levels_config.model_copy(update={"levels_dir": str(parsed_args.level_dir)})

    return app_config.model_copy(
        update={"display": display_config, "gameplay": gameplay_config, "levels": levels_config}
    )


def _load_charts(app_config: AppConfig, config_path: Optional[Path]) -> Dict[int, LevelChart]:
    level_paths = paths.level_paths(app_config, config_path)
    return load_level_set(level_paths, strict=bool(app_config.levels.strict_rows))


def _check_levels_payload(charts: Dict[int, LevelChart]) -> Dict[str, object]:
    levels: List[Dict[str, object]] = []
    for level, chart in sorted(charts.items()):
        levels.append(
            {
                "level": level,
                "source": chart.source,
                "lanes": dict(chart.lanes),
                "notes": len(chart.notes),
                "skipped_rows": chart.skipped_rows,
            }
        )
    return {"ok": True, "levels": levels}


def _run_gui(app_config: AppConfig, config_path: Optional[Path], charts: Dict[int, LevelChart]) -> int:
    from PyQt6.QtWidgets import QApplication

    from game_state_machine import GameStateMachine
    from game_window import GameWindow, QtTextMeasurer, register_font
    from input_router import InputRouter
    from sprite_atlas import SpriteAtlas

    qt_application = QApplication(sys.argv)

    primary_screen = qt_application.primaryScreen()
    refresh_rate_hz = float(primary_screen.refreshRate()) if primary_screen is not None else None
    scroll_speed = base_scroll_speed(app_config.gameplay, refresh_rate_hz)
    logger.info("Display refresh rate %s Hz, base scroll speed %d", refresh_rate_hz, scroll_speed)

    assets_dir = paths.assets_dir(app_config, config_path)
    font_family = register_font(assets_dir / app_config.assets.font_file)
    measurer = QtTextMeasurer(font_family)

    display_config = app_config.display
    machine = GameStateMachine(
        charts,
        measurer=measurer,
        window_width=display_config.width,
        window_height=display_config.height,
        base_scroll_speed=scroll_speed,
        seed=app_config.gameplay.enemy_seed,
    )

    router = InputRouter()
    game_window = GameWindow(
        machine=machine,
        router=router,
        atlas=SpriteAtlas(assets_dir),
        measurer=measurer,
        fps=display_config.fps,
        logical_width=display_config.width,
        logical_height=display_config.height,
    )
    game_window.setWindowTitle(display_config.title)

    if display_config.fullscreen:
        game_window.showFullScreen()
    else:
        game_window.show()

    game_window.start()
    return int(qt_application.exec())


def main(argv: Optional[List[str]] = None) -> int:
    parsed_args = build_argument_parser().parse_args(argv)
    _configure_logging(parsed_args.log_level)

    try:
        app_config, config_path = get_config()
    except (OSError, ValueError) as exception:
        return _print_error(str(exception))

    app_config = _apply_argument_overrides(app_config, parsed_args)

    try:
        charts = _load_charts(app_config, config_path)
    except LevelConfigError as exception:
        return _print_error(str(exception))
    except LaneNotFoundError as exception:
        return _print_error(f"Level references an undeclared lane: {exception.lane_name}")

    if parsed_args.check_levels:
        print(json.dumps(_check_levels_payload(charts), ensure_ascii=False, indent=2))
        return 0

    return _run_gui(app_config, config_path, charts)


if __name__ == "__main__":
    raise SystemExit(main())
