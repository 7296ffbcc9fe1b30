from __future__ import annotations

import logging
import os
from dataclasses import dataclass

OBSERVER_ERROR_POLICIES = frozenset({"reject", "raise"})

_TRUE = {"1", "true", "TRUE", "yes", "YES", "on", "ON"}
_FALSE = {"0", "false", "FALSE", "no", "NO", "off", "OFF"}


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean environment variable; unknown values keep the default."""

    raw = os.environ.get(name, "").strip()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    return default


@dataclass(frozen=True, slots=True)
class SpaceConfig:
    """Configuration for a PrototypeSpace.

    - cache_enabled: memoize prototype-chain lookups per property name.
    - observer_errors: "reject" treats an observer that raises as a veto,
      "raise" propagates the failure as ObserverError.
    - log_level: level applied to the "protodel" logger.
    """

    cache_enabled: bool = True
    observer_errors: str = "reject"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if not isinstance(self.cache_enabled, bool):
            raise TypeError("cache_enabled must be a bool")
        if self.observer_errors not in OBSERVER_ERROR_POLICIES:
            raise ValueError(
                f"observer_errors must be one of {sorted(OBSERVER_ERROR_POLICIES)}"
            )
        level = str(self.log_level).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {self.log_level}")
        object.__setattr__(self, "log_level", level)

    @classmethod
    def from_env(cls) -> "SpaceConfig":
        """Load configuration from PROTODEL_* environment variables.

        Invalid values fall back to the defaults.
        """

        policy = os.environ.get("PROTODEL_OBSERVER_ERRORS", "").strip().lower()
        if policy not in OBSERVER_ERROR_POLICIES:
            policy = "reject"

        level = os.environ.get("PROTODEL_LOG_LEVEL", "").strip().upper()
        if not level or not isinstance(logging.getLevelName(level), int):
            level = "WARNING"

        return cls(
            cache_enabled=_env_bool("PROTODEL_CACHE_ENABLED", True),
            observer_errors=policy,
            log_level=level,
        )

    def apply_logging(self) -> None:
        logging.getLogger("protodel").setLevel(self.log_level)
