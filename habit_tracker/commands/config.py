"""Config command - show or change settings."""

import json
import logging
from typing import Optional

from ..core.exceptions import ConfigurationError
from ..core.models import AppConfig
from ..utils.date import resolve_timezone


class ConfigCommand:
    """Command for inspecting and updating the configuration."""

    def __init__(self, config: AppConfig, verbose: bool = False):
        self.config = config
        self.verbose = verbose
        self.logger = logging.getLogger(__name__)
        if verbose:
            self.logger.setLevel(logging.DEBUG)

    def run(
        self,
        timezone: Optional[str] = None,
        window: Optional[int] = None,
        first_day: Optional[str] = None,
        log_to_file: Optional[bool] = None,
    ) -> bool:
        """
        Apply the given changes to the in-memory configuration and print it.

        The caller persists the configuration when this returns True.
        """
        try:
            if timezone is not None:
                resolve_timezone(timezone)
                self.config.timezone = timezone
            if window is not None:
                if window < 1:
                    raise ConfigurationError("Success window must be at least one day")
                self.config.success_window_days = window
            if first_day is not None:
                self.config.first_day_of_week = 0 if first_day == "sunday" else 1
            if log_to_file is not None:
                self.config.log_to_file = log_to_file

            print(json.dumps(self.config.to_dict(), indent=2, ensure_ascii=False))
            return True
        except ConfigurationError as exc:
            print(f"Error: {exc}")
            return False
