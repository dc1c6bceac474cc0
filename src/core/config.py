"""
Configuration and logging setup.

- Settings are read from environment variables (prefixed with CHESS_), with sensible defaults.
- `configure_logging()` should be called once by the entry point, library modules only create their own loggers.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Optional

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

TRUTHY = {"1", "true", "yes", "on"}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTHY


def _get(name: str, default: Any, cast: Optional[Callable[[Any], Any]] = None) -> Any:
    env = os.environ.get(name)
    if env is None:
        return default
    return cast(env) if cast else env


@dataclass(frozen=True)
class Settings:
    log_level: str
    log_format: str
    # join "e four" into "e4" before parsing voice commands
    voice_spoken_ranks: bool

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            log_level=str(_get("CHESS_LOG_LEVEL", "INFO")).upper(),
            log_format=_get("CHESS_LOG_FORMAT", DEFAULT_LOG_FORMAT),
            voice_spoken_ranks=_get("CHESS_VOICE_SPOKEN_RANKS", True, cast=_as_bool),
        )


SETTINGS = Settings.from_env()


def configure_logging(settings: Settings = SETTINGS) -> None:
    """Root logger setup for the entry point. Unknown level names fall back to INFO."""
    level = logging.getLevelNamesMapping().get(settings.log_level, logging.INFO)
    logging.basicConfig(level=level, format=settings.log_format, force=True)
