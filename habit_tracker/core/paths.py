"""
Centralized path management for habit-tracker.

Resolves the working directory and the locations of the configuration
file, the habit data file and the log directory.
"""

import os
import sys
from pathlib import Path
from typing import Optional
import logging


class PathManager:
    """Manages habit-tracker file paths."""

    # Directory names
    APP_DIR_NAME = "habit-tracker"
    HOME_ENV_VAR = "HABIT_TRACKER_HOME"

    # File names
    CONFIG_FILE = "config.json"
    DATA_FILE = "habits.json"
    LOG_FILE = "habit-tracker.log"

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Initialize path manager."""
        self.logger = logger or logging.getLogger(__name__)
        self._working_dir: Optional[Path] = None

    def _default_user_dir(self) -> Path:
        """Platform-appropriate per-user data directory."""
        if sys.platform == "darwin":
            return Path.home() / "Library" / "Application Support" / self.APP_DIR_NAME
        if sys.platform.startswith("win"):
            appdata = os.environ.get("APPDATA")
            if appdata:
                return Path(appdata) / self.APP_DIR_NAME
            return Path.home() / "AppData" / "Roaming" / self.APP_DIR_NAME
        return Path.home() / ".config" / self.APP_DIR_NAME

    @property
    def working_dir(self) -> Path:
        """
        Get the working directory for habit-tracker data.

        Priority order:
        1. HABIT_TRACKER_HOME environment variable (explicit override)
        2. Platform user data directory (~/.config/habit-tracker on Linux)
        """
        if self._working_dir is not None:
            return self._working_dir

        env_override = os.environ.get(self.HOME_ENV_VAR)
        if env_override:
            env_path = Path(env_override).expanduser().resolve()
            self.logger.debug(f"Using {self.HOME_ENV_VAR} override: {env_path}")
            self._working_dir = env_path
        else:
            self._working_dir = self._default_user_dir()
            self.logger.debug(f"Using user data directory: {self._working_dir}")

        return self._working_dir

    def ensure_directories(self) -> None:
        """Ensure all required directories exist."""
        for directory in (self.working_dir, self.data_dir, self.log_dir):
            directory.mkdir(parents=True, exist_ok=True)
            self.logger.debug(f"Ensured directory exists: {directory}")

    @property
    def data_dir(self) -> Path:
        """Get the data directory holding the habit store."""
        return self.working_dir / "data"

    @property
    def log_dir(self) -> Path:
        """Get the log directory."""
        return self.working_dir / "logs"

    @property
    def config_path(self) -> Path:
        """Get the configuration file path."""
        return self.working_dir / self.CONFIG_FILE

    @property
    def data_path(self) -> Path:
        """Get the habit data file path."""
        return self.data_dir / self.DATA_FILE

    @property
    def log_path(self) -> Path:
        """Get the rotating log file path."""
        return self.log_dir / self.LOG_FILE


def get_path_manager() -> PathManager:
    """Create a PathManager for the current environment."""
    return PathManager()
