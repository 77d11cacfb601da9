import copy
import json
import logging
from pathlib import Path
from typing import Any, List, Optional
from typing_extensions import TypedDict

from bingoboard.common.constants import (
    DEFAULT_COLUMNS,
    DEFAULT_PIPE_NAME,
    DEFAULT_ROWS,
    LISTENER_INTERVAL,
    MIN_FPS,
)
from bingoboard.common.enums import GridPivot
from bingoboard.common.utils import parse_pivot

logger = logging.getLogger(__name__)


class PaddingConfig(TypedDict):
    """Type definition for grid padding."""

    left: int
    right: int
    top: int
    bottom: int


class ConfigData(TypedDict):
    """Type definition for the complete configuration structure."""

    columns: int
    rows: int
    cell_size: List[float]  # [width, height]
    position_offset: List[float]  # [x, y]
    spacing: List[float]  # [x, y]
    padding: PaddingConfig
    grid_pivot: str
    element_pivot: str
    constrain_by_column: bool
    pipe_path: str
    window_size: Optional[List[int]]
    fps: float
    listener_interval: float
    read_timeout: Optional[float]


class ConfigManager:
    """Handles loading and saving the board configuration."""

    DEFAULT_CONFIG: ConfigData = {
        "columns": DEFAULT_COLUMNS,
        "rows": DEFAULT_ROWS,
        "cell_size": [115.0, 115.0],
        "position_offset": [0.0, 0.0],
        "spacing": [10.0, 10.0],
        "padding": {"left": 0, "right": 0, "top": 0, "bottom": 0},
        "grid_pivot": GridPivot.UPPER_LEFT.name,
        "element_pivot": GridPivot.UPPER_LEFT.name,
        "constrain_by_column": True,
        "pipe_path": DEFAULT_PIPE_NAME,
        "window_size": None,
        "fps": 15.0,
        "listener_interval": LISTENER_INTERVAL,
        "read_timeout": None,
    }

    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = Path(config_file) if config_file else Path("bingo_config.json")
        self.data = self._load_or_create_config()

    def _load_or_create_config(self) -> ConfigData:
        """Load config from file or create default if it doesn't exist."""
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    config_data = json.load(f)
                    logger.info(f"Loaded config from {self.config_file.resolve()}")

                if not isinstance(config_data, dict):
                    raise ValueError("top-level JSON value is not an object")

                # Merge with defaults to ensure all keys exist
                merged_config = self._deep_merge_config(self.DEFAULT_CONFIG, config_data)

                # Save back to file if new keys were added
                if merged_config != config_data:
                    self._save_config(merged_config)
                    logger.info("Updated config file with missing default values")

                return merged_config

            except (json.JSONDecodeError, ValueError, IOError) as e:
                logger.error(f"Error loading config from {self.config_file}: {e}")
                logger.info("Creating new config file with defaults")

        # Create default config file
        self._save_config(self.DEFAULT_CONFIG)
        logger.info(f"Created default config file at {self.config_file}")
        return copy.deepcopy(self.DEFAULT_CONFIG)

    def _save_config(self, config_data: ConfigData) -> None:
        """Save config data to file."""
        try:
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(config_data, f, indent=4, sort_keys=True)
        except IOError as e:
            logger.error(f"Error saving config to {self.config_file}: {e}")

    def _deep_merge_config(self, default_config: Any, user_config: Any) -> Any:
        """Deep merge user config with defaults, ensuring all default keys exist."""
        merged = copy.deepcopy(default_config)

        for key, value in user_config.items():
            if (
                key in merged
                and isinstance(merged[key], dict)
                and isinstance(value, dict)
            ):
                merged[key] = self._deep_merge_config(merged[key], value)
            else:
                merged[key] = value
        return merged

    def reload_config(self) -> None:
        """Reload configuration from file."""
        self.data = self._load_or_create_config()

    def save(self) -> None:
        """Save current configuration to file."""
        self._save_config(self.data)
        logger.info(f"Saved configuration to {self.config_file}")

    def get_pivot(self, key: str) -> GridPivot:
        """Get a pivot setting ("grid_pivot" or "element_pivot") as an enum.

        Unknown names fall back to the upper-left pivot.
        """
        raw = self.data.get(key, GridPivot.UPPER_LEFT.name)
        pivot = parse_pivot(raw)
        if pivot is None:
            logger.warning(f"Unknown pivot {raw!r} for {key}, using UPPER_LEFT")
            return GridPivot.UPPER_LEFT
        return pivot

    def get_fps(self) -> float:
        """Get the tick rate, never below one frame per second."""
        try:
            fps = float(self.data.get("fps", self.DEFAULT_CONFIG["fps"]))
        except (TypeError, ValueError):
            fps = self.DEFAULT_CONFIG["fps"]
        return max(fps, MIN_FPS)

    def get_pipe_path(self) -> Path:
        """Get the control channel path, relative paths resolved next to the config file."""
        pipe_path = Path(self.data.get("pipe_path") or DEFAULT_PIPE_NAME)
        if not pipe_path.is_absolute():
            pipe_path = self.config_file.resolve().parent / pipe_path
        return pipe_path


# Global config manager instance
_config_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get the global config manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
