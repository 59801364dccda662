# -*- coding: utf-8 -*-
########################
# paths.py
########################
# Purpose:
# - Central filesystem path helpers for the app.
# - Resolves where level files and sprite images live.
#
# Design notes:
# - Keep path derivation consistent across modules.
# - No Qt usage. Return pathlib.Path only.
# - Relative directories in the config resolve against the config file's directory,
#   or against the directory of these modules when no config file was found.
#
########################
# Interfaces:
# Public functions:
# - app_root_dir() -> pathlib.Path
# - base_dir_for(config_path: Optional[Path]) -> pathlib.Path
# - levels_dir(config: AppConfig, config_path: Optional[Path]) -> pathlib.Path
# - assets_dir(config: AppConfig, config_path: Optional[Path]) -> pathlib.Path
# - level_paths(config: AppConfig, config_path: Optional[Path]) -> dict[int, pathlib.Path]
#
# Inputs:
# - AppConfig and the path it was loaded from (config.load_config()).
#
# Outputs:
# - Paths used by level_loader.py and sprite_atlas.py.
#
########################

from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, Optional

from config import AppConfig


def app_root_dir() -> Path:
    """Directory holding the game's modules and bundled levels.

    A frozen build keeps its data next to the executable instead.
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parent


def base_dir_for(config_path: Optional[Path]) -> Path:
    if config_path is not None:
        return Path(config_path).resolve().parent
    return app_root_dir()


def _resolve(directory_text: str, config_path: Optional[Path]) -> Path:
    directory = Path(directory_text).expanduser()
    if directory.is_absolute():
        return directory
    return base_dir_for(config_path) / directory


def levels_dir(config: AppConfig, config_path: Optional[Path]) -> Path:
    """Return the level file directory (not created automatically)."""
    return _resolve(config.levels.levels_dir, config_path)


def assets_dir(config: AppConfig, config_path: Optional[Path]) -> Path:
    """Return the sprite and font directory (not created automatically)."""
    return _resolve(config.assets.assets_dir, config_path)


def level_paths(config: AppConfig, config_path: Optional[Path]) -> Dict[int, Path]:
    directory = levels_dir(config, config_path)
    return {level: directory / file_name for level, file_name in sorted(config.levels.level_files.items())}
