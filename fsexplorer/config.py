"""Explorer configuration

Priority (highest to lowest):
    1. Explicit arguments (passed to ExplorerOptions / from_env overrides)
    2. Environment variables (FSEXPLORER_* prefix)
    3. Built-in defaults

Environment Variables:
    FSEXPLORER_START_DIR - Directory the session starts in
    FSEXPLORER_MAX_DEPTH - Depth limit for recursive search
    FSEXPLORER_LOG_LEVEL - Logging level name (DEBUG, INFO, WARNING, ...)
"""

import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from .constants import DEFAULT_MAX_DEPTH

ENV_PREFIX = "FSEXPLORER_"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass
class ExplorerOptions:
    """Configuration options for an explorer session

    Attributes:
        start_dir: Directory the session starts in
        max_depth: How many directory levels below the search root's
            children a recursive search descends
        log_level: Logging level name
    """

    start_dir: str = "."
    max_depth: int = DEFAULT_MAX_DEPTH
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid log level {self.log_level!r}; expected one of {', '.join(_LOG_LEVELS)}"
            )
        if self.max_depth < 0:
            raise ValueError("max_depth must be >= 0")

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **overrides: Any,
    ) -> "ExplorerOptions":
        """Build options from FSEXPLORER_* variables, then apply overrides

        Overrides that are None are ignored, so CLI options that were not
        given fall through to the environment.

        Example:
            >>> ExplorerOptions.from_env({"FSEXPLORER_MAX_DEPTH": "8"}).max_depth
            8
        """
        env = os.environ if environ is None else environ
        values: dict = {}
        for field in fields(cls):
            raw = env.get(ENV_PREFIX + field.name.upper())
            if raw is None or raw == "":
                continue
            if field.name == "max_depth":
                try:
                    values[field.name] = int(raw)
                except ValueError:
                    raise ValueError(
                        f"{ENV_PREFIX}MAX_DEPTH must be an integer, got {raw!r}"
                    ) from None
            else:
                values[field.name] = raw

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
