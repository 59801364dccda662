"""
config.py

Typed configuration loading and validation for Shadow Dance.

Design goals
- Load at most one UTF-8 JSON config file
- Validate with pydantic (defaults included)
- Support environment variable overrides
- No other I/O beyond reading the config file (no directory creation)

Config file location
- If SHADOWDANCE_CONFIG_PATH is set, that file is used and must exist.
- Otherwise Shadow Dance searches these paths in order and uses the first one that exists:
  1) ./shadowdance_config.json (current working directory)
  2) <user config dir>/ShadowDance/shadowdance_config.json
  3) <user config dir>/ShadowDance/config.json
- When none exists the built-in defaults are used.

Example config file (shadowdance_config.json)
{
  "display": {
    "fps": 60,
    "fullscreen": false
  },
  "gameplay": {
    "scroll_speed": null,
    "enemy_seed": null
  },
  "levels": {
    "levels_dir": "levels",
    "level_files": {"1": "level1.csv", "2": "level2.csv", "3": "level3.csv"},
    "strict_rows": false
  },
  "assets": {
    "assets_dir": "res",
    "font_file": "FSO8BITR.TTF"
  }
}
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError, field_validator


class DisplayConfig(BaseModel):
    width: int = Field(default=1024, ge=320, le=10000, description="Window width in pixels.")
    height: int = Field(default=768, ge=240, le=10000, description="Window height in pixels.")
    title: str = Field(default="SHADOW DANCE", description="Window title.")
    fps: int = Field(default=60, ge=30, le=240, description="Frames per second. Every frame advances the game once.")
    fullscreen: bool = Field(default=False, description="Start in fullscreen.")


class GameplayConfig(BaseModel):
    scroll_speed: Optional[int] = Field(default=None, ge=1, le=20, description="Fixed base scroll speed in px per frame.")
    fast_refresh_threshold_hz: float = Field(default=60.0, gt=0, description="Displays above this rate scroll slower.")
    slow_display_scroll_speed: int = Field(default=4, ge=1, le=20)
    fast_display_scroll_speed: int = Field(default=2, ge=1, le=20)
    enemy_seed: Optional[int] = Field(default=None, description="Seed for enemy placement. None means random.")


class LevelsConfig(BaseModel):
    levels_dir: str = Field(default="levels", description="Directory holding the level files.")
    level_files: Dict[int, str] = Field(
        default_factory=lambda: {1: "level1.csv", 2: "level2.csv", 3: "level3.csv"},
        description="Level number to file name, relative to levels_dir.",
    )
    strict_rows: bool = Field(default=False, description="Fail on malformed level rows instead of skipping them.")

    @field_validator("level_files")
    @classmethod
    def validate_level_files(cls, value: Dict[int, str]) -> Dict[int, str]:
        if set(value.keys()) != {1, 2, 3}:
            raise ValueError("level_files must map exactly the levels 1, 2 and 3")
        cleaned: Dict[int, str] = {}
        for level, file_name in value.items():
            trimmed = (file_name or "").strip()
            if not trimmed:
                raise ValueError(f"level_files entry for level {level} is empty")
            cleaned[level] = trimmed
        return cleaned


class AssetsConfig(BaseModel):
    assets_dir: str = Field(default="res", description="Directory holding <sprite id>.png images.")
    font_file: str = Field(default="FSO8BITR.TTF", description="Optional font file inside assets_dir.")


class AppConfig(BaseModel):
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    gameplay: GameplayConfig = Field(default_factory=GameplayConfig)
    levels: LevelsConfig = Field(default_factory=LevelsConfig)
    assets: AssetsConfig = Field(default_factory=AssetsConfig)


def base_scroll_speed(gameplay_config: GameplayConfig, refresh_rate_hz: Optional[float]) -> int:
    """Scroll speed a new session starts with.

    Fast displays run more frames per second, so they scroll fewer pixels per frame.
    An unknown refresh rate counts as a slow display.
    """
    if gameplay_config.scroll_speed is not None:
        return int(gameplay_config.scroll_speed)
    if refresh_rate_hz is None or float(refresh_rate_hz) <= float(gameplay_config.fast_refresh_threshold_hz):
        return int(gameplay_config.slow_display_scroll_speed)
    return int(gameplay_config.fast_display_scroll_speed)


def _default_config_candidates() -> List[Path]:
    config_directory = Path(user_config_dir("ShadowDance", appauthor=False))
    return [
        Path.cwd() / "shadowdance_config.json",
        config_directory / "shadowdance_config.json",
        config_directory / "config.json",
    ]


def _resolve_config_path() -> Optional[Path]:
    explicit_path_text = os.environ.get("SHADOWDANCE_CONFIG_PATH", "").strip()
    if explicit_path_text:
        explicit_path = Path(explicit_path_text)
        if not explicit_path.exists():
            raise FileNotFoundError(f"SHADOWDANCE_CONFIG_PATH points to a missing file: {explicit_path}")
        return explicit_path

    for candidate_path in _default_config_candidates():
        if candidate_path.exists():
            return candidate_path
    return None


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    try:
        document = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise
    except json.JSONDecodeError as exception:
        raise ValueError(f"{config_path} is not valid JSON: {exception}") from exception
    except (OSError, UnicodeDecodeError) as exception:
        raise OSError(f"Could not read {config_path}: {exception}") from exception

    if not isinstance(document, dict):
        raise ValueError(f"{config_path} must contain a JSON object at the top level")
    return document


def _parse_int(value_text: str) -> Optional[int]:
    try:
        return int(value_text)
    except ValueError:
        return None


def _parse_bool(value_text: str) -> Optional[bool]:
    lowered = value_text.lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return None


# (variable, section, key, parser). A parser returning None leaves the value alone.
_ENVIRONMENT_OVERRIDES: Tuple[Tuple[str, str, str, Callable[[str], Any]], ...] = (
    ("SHADOWDANCE_SCROLL_SPEED", "gameplay", "scroll_speed", _parse_int),
    ("SHADOWDANCE_ENEMY_SEED", "gameplay", "enemy_seed", _parse_int),
    ("SHADOWDANCE_FPS", "display", "fps", _parse_int),
    ("SHADOWDANCE_FULLSCREEN", "display", "fullscreen", _parse_bool),
    ("SHADOWDANCE_LEVELS_DIR", "levels", "levels_dir", str),
    ("SHADOWDANCE_ASSETS_DIR", "assets", "assets_dir", str),
)


def _apply_environment_overrides(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Layer SHADOWDANCE_* variables over the file contents. Unparsable values are ignored."""
    merged: Dict[str, Any] = dict(config_dict)

    for env_name, section_name, key_name, parser in _ENVIRONMENT_OVERRIDES:
        raw_value = os.environ.get(env_name, "").strip()
        if not raw_value:
            continue
        parsed_value = parser(raw_value)
        if parsed_value is None:
            continue

        section = merged.get(section_name)
        section = dict(section) if isinstance(section, dict) else {}
        section[key_name] = parsed_value
        merged[section_name] = section

    return merged


def load_config(config_path: Optional[Path] = None) -> Tuple[AppConfig, Optional[Path]]:
    resolved_path = config_path if config_path is not None else _resolve_config_path()
    json_dict = _read_config_file(resolved_path) if resolved_path is not None else {}
    json_dict = _apply_environment_overrides(json_dict)

    try:
        config = AppConfig.model_validate(json_dict)
    except ValidationError as exception:
        source_text = str(resolved_path) if resolved_path is not None else "built-in defaults"
        raise ValueError(f"Config validation failed for {source_text}:\n{exception}") from exception

    return config, resolved_path


@lru_cache(maxsize=1)
def get_config() -> Tuple[AppConfig, Optional[Path]]:
    return load_config()


def main() -> int:
    try:
        config, resolved_path = load_config()
    except Exception as exception:
        error_payload = {"ok": False, "error": str(exception)}
        print(json.dumps(error_payload, ensure_ascii=False, indent=2))
        return 2

    output_payload = {
        "ok": True,
        "config_path": str(resolved_path) if resolved_path is not None else None,
        "config": config.model_dump(mode="json"),
    }
    print(json.dumps(output_payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
