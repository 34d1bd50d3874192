from __future__ import annotations

import dataclasses
import logging
import math
import os
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from platformdirs import user_config_dir

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "echo-maze"
ENV_PREFIX = "ECHOMAZE_"


@dataclass
class GridSettings:
    size: int = 10
    min_endpoint_distance: int = 5


@dataclass
class GeneratorSettings:
    turn_bias: float = 0.6
    greedy_bias: float = 0.4
    room_chance: float = 0.12
    max_rooms: int = 3
    room_min_distance_from_start: int = 5
    room_min_distance_to_end: int = 5
    room_clearance: int = 2


@dataclass
class EntitySettings:
    trap_count: int = 3
    max_goblins: int = 2


@dataclass
class TimingSettings:
    """All durations in seconds."""

    goblin_tick_interval: float = 2.0
    proximity_sample_interval: float = 0.1
    death_restart_delay: float = 1.5  # length of the death cue
    win_continue_delay: float = 3.0
    trap_countdown_seconds: int = 5
    trap_tick_interval: float = 1.0
    hear_result_delay: float = 0.25
    double_tap_window: float = 0.3


@dataclass
class AudioSettings:
    max_audible_distance: float = 3.0


@dataclass
class GameConfig:
    """Complete runtime configuration.

    Load order: packaged ``default_settings.yaml``, then an optional user YAML file deep-merged
    on top, then ``ECHOMAZE_*`` environment overrides.
    """

    seed: Optional[int] = None
    grid: GridSettings = field(default_factory=GridSettings)
    generator: GeneratorSettings = field(default_factory=GeneratorSettings)
    entities: EntitySettings = field(default_factory=EntitySettings)
    timing: TimingSettings = field(default_factory=TimingSettings)
    audio: AudioSettings = field(default_factory=AudioSettings)

    # ----- Loading -----

    @staticmethod
    def default_user_path() -> Path:
        return Path(user_config_dir(APP_NAME)) / "settings.yaml"

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Top level of {path} must be a mapping")
        return data

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def _load_defaults(cls) -> dict:
        try:
            text = resources.files("echomaze.data").joinpath("default_settings.yaml").read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning("Default settings not found; falling back to dataclass defaults.")
            return dataclasses.asdict(cls())
        return yaml.safe_load(text) or {}

    @classmethod
    def load(
        cls,
        user_path: Optional[Path] = None,
        *,
        include_user_file: bool = True,
        env: Optional[Mapping[str, str]] = None,
    ) -> "GameConfig":
        """Build a config from defaults, the user file and the environment.

        ``user_path`` defaults to ``settings.yaml`` in the platform config directory; a missing
        default file is fine, a missing explicit one is logged.
        """
        data = cls._load_defaults()

        if include_user_file:
            explicit = user_path is not None
            path = user_path if explicit else cls.default_user_path()
            if path.exists():
                data = cls._deep_merge(data, cls._load_yaml(path))
                logger.info("Loaded user settings from %s", path)
            elif explicit:
                logger.warning("User settings file not found: %s", path)

        data = cls._deep_merge(data, cls._env_overrides(os.environ if env is None else env))
        config = cls.from_dict(data)
        config.validate()
        logger.debug("Settings merged: %s", config)
        return config

    @staticmethod
    def _env_overrides(env: Mapping[str, str]) -> dict:
        overrides: Dict[str, Any] = {}
        raw_seed = env.get(ENV_PREFIX + "SEED")
        if raw_seed:
            overrides["seed"] = _parse_int(raw_seed, ENV_PREFIX + "SEED")
        raw_traps = env.get(ENV_PREFIX + "TRAP_COUNT")
        if raw_traps:
            overrides["entities"] = {"trap_count": _parse_int(raw_traps, ENV_PREFIX + "TRAP_COUNT")}
        raw_size = env.get(ENV_PREFIX + "GRID_SIZE")
        if raw_size:
            overrides["grid"] = {"size": _parse_int(raw_size, ENV_PREFIX + "GRID_SIZE")}
        return overrides

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GameConfig":
        known = {f.name for f in dataclasses.fields(cls)}
        for key in data:
            if key not in known:
                logger.warning("Ignoring unknown settings section: %s", key)
        seed = data.get("seed")
        if seed is not None:
            seed = _parse_int(seed, "seed")
        return cls(
            seed=seed,
            grid=_section(GridSettings, data.get("grid"), "grid"),
            generator=_section(GeneratorSettings, data.get("generator"), "generator"),
            entities=_section(EntitySettings, data.get("entities"), "entities"),
            timing=_section(TimingSettings, data.get("timing"), "timing"),
            audio=_section(AudioSettings, data.get("audio"), "audio"),
        )

    # ----- Validation -----

    def validate(self) -> None:
        """Raise ConfigError for values the game cannot run with."""
        g = self.grid
        if g.size < 2:
            raise ConfigError(f"grid.size must be >= 2, got {g.size}")
        if not 0 < g.min_endpoint_distance <= 2 * (g.size - 1):
            raise ConfigError(
                f"grid.min_endpoint_distance {g.min_endpoint_distance} cannot fit a {g.size}x{g.size} grid"
            )
        for name in ("turn_bias", "greedy_bias", "room_chance"):
            value = getattr(self.generator, name)
            if not (0.0 <= value <= 1.0):
                raise ConfigError(f"generator.{name} must be within [0, 1], got {value}")
        if self.generator.max_rooms < 0:
            raise ConfigError("generator.max_rooms must be >= 0")
        if self.entities.trap_count < 0 or self.entities.max_goblins < 0:
            raise ConfigError("entities counts must be >= 0")
        t = self.timing
        for name in (
            "goblin_tick_interval",
            "proximity_sample_interval",
            "trap_tick_interval",
            "double_tap_window",
        ):
            value = getattr(t, name)
            if not (value > 0 and math.isfinite(value)):
                raise ConfigError(f"timing.{name} must be a positive number, got {value}")
        for name in ("death_restart_delay", "win_continue_delay", "hear_result_delay"):
            if getattr(t, name) < 0:
                raise ConfigError(f"timing.{name} must be >= 0")
        if t.trap_countdown_seconds < 1:
            raise ConfigError("timing.trap_countdown_seconds must be >= 1")
        if self.audio.max_audible_distance <= 0:
            raise ConfigError("audio.max_audible_distance must be > 0")


def _parse_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc


def _section(cls, raw: Any, name: str):
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise ConfigError(f"Settings section '{name}' must be a mapping")
    defaults = cls()
    values = {}
    for key, value in raw.items():
        if not hasattr(defaults, key):
            logger.warning("Ignoring unknown setting %s.%s", name, key)
            continue
        try:
            values[key] = type(getattr(defaults, key))(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"{name}.{key}: invalid value {value!r}") from exc
    return cls(**values)
