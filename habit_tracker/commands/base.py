"""Shared plumbing for habit-tracker commands."""

import logging
import traceback
from typing import Optional

from ..core.exceptions import HabitTrackerError
from ..core.models import AppConfig
from ..storage.repository import HabitRepository


class BaseCommand:
    """Holds the configuration, logger and repository a command works with."""

    def __init__(
        self,
        config: AppConfig,
        verbose: bool = False,
        repository: Optional[HabitRepository] = None,
    ):
        self.config = config
        self.verbose = verbose
        self.logger = logging.getLogger(self.__class__.__module__)
        if verbose:
            self.logger.setLevel(logging.DEBUG)
        self.repository = repository or HabitRepository(config.data_path, logger=self.logger)

    def _fail(self, action: str, exc: Exception) -> bool:
        """Report a failed command and return False."""
        if isinstance(exc, HabitTrackerError):
            self.logger.debug("%s failed: %s", action, exc)
            print(f"Error: {exc}")
        else:
            self.logger.error("%s failed: %s", action, exc)
            if self.verbose:
                traceback.print_exc()
        return False
