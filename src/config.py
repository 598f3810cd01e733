"""
Run configuration for the FizzBuzz CLI.

Values come from command-line flags, falling back to environment variables:
    FIZZBUZZ_LIMIT    Upper limit of the sequence (default 64, must be >= 1)
    FIZZBUZZ_ADAPTER  Classifier implementation: math | httpapi (default math)
    LOG_LEVEL         Logging level name (default INFO)
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from domain.models import ClassifierKind

DEFAULT_LIMIT = 64
DEFAULT_ADAPTER = ClassifierKind.MATH.value
DEFAULT_LOG_LEVEL = 'INFO'


class ConfigurationError(Exception):
    """Raised when run configuration is invalid or missing."""
    pass


@dataclass(frozen=True)
class Settings:
    """
    Validated run settings.

    Attributes:
        upper_limit: Last integer of the sequence (>= 1)
        adapter: Classifier implementation to use
        log_level: Logging level name (e.g. "INFO", "DEBUG")
    """
    upper_limit: int
    adapter: ClassifierKind
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_values(
        cls,
        upper_limit: Union[int, str],
        adapter: str,
        log_level: Optional[str] = None
    ) -> 'Settings':
        """
        Validate raw values and build Settings.

        Raises:
            ConfigurationError: If any value is invalid
        """
        try:
            limit = int(upper_limit)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid upper limit: {upper_limit!r} is not an integer")

        if limit < 1:
            raise ConfigurationError(f"Invalid upper limit: {limit}, must be higher than 0")

        try:
            kind = ClassifierKind(adapter)
        except ValueError:
            raise ConfigurationError(
                f"Invalid adapter: {adapter!r}, expected one of {', '.join(ClassifierKind.names())}"
            )

        level = (log_level or DEFAULT_LOG_LEVEL).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigurationError(f"Invalid log level: {log_level!r}")

        return cls(upper_limit=limit, adapter=kind, log_level=level)
