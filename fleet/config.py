"""Runtime settings read from the environment."""

import dataclasses
import os
from datetime import date
from typing import Mapping, Optional

from .calculations import DUE_SOON_DAYS
from .dates import parse_flexible_date
from .errors import ConfigError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_int(value: Optional[str], default: int, name: str) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None


@dataclasses.dataclass(frozen=True)
class Settings:
    """
    Settings for the CLI.

    Parameters
    ----------
    due_soon_days : int
        Days before a due date at which a category counts as DUE_SOON.
    today : date or None
        Fixed "today" for all calculations; None means the system date.
    log_level : str
        Standard logging level name.
    """

    due_soon_days: int = DUE_SOON_DAYS
    today: Optional[date] = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``FLEET_*`` environment variables."""
        env = os.environ if environ is None else environ

        due_soon_days = _env_int(
            env.get("FLEET_DUE_SOON_DAYS"), DUE_SOON_DAYS, "FLEET_DUE_SOON_DAYS"
        )
        if due_soon_days < 0:
            raise ConfigError("FLEET_DUE_SOON_DAYS must not be negative")

        today = None
        raw_today = env.get("FLEET_TODAY")
        if raw_today:
            today = parse_flexible_date(raw_today)
            if today is None:
                raise ConfigError(f"FLEET_TODAY must be an ISO date, got {raw_today!r}")

        log_level = (env.get("FLEET_LOG_LEVEL") or "WARNING").strip().upper()
        if log_level not in _LOG_LEVELS:
            raise ConfigError(f"FLEET_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}")

        return cls(due_soon_days=due_soon_days, today=today, log_level=log_level)

    def current_date(self) -> date:
        """The date calculations should treat as today."""
        return self.today or date.today()
