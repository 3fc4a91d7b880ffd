"""Engine configuration objects and helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int, *, minimum: int = 1) -> int:
    """Read a positive integer setting, rejecting malformed values."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc
    if parsed < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {parsed}")
    return parsed


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "hmsbudget"
    DEFAULT_PAYOFF_HORIZON = 1200
    DEFAULT_CURRENCY_PLACES = 2
    STRATEGIES = ("avalanche", "snowball")

    def __init__(self) -> None:
        self.DEV_MODE = _env_bool("HMSBUDGET_DEV_MODE", default=True)
        self.DATA_DIR = Path(os.getenv("HMSBUDGET_DATA_DIR", "instance")).expanduser()
        self.PAYOFF_HORIZON = _env_int("HMSBUDGET_PAYOFF_HORIZON", self.DEFAULT_PAYOFF_HORIZON)
        self.CURRENCY_PLACES = _env_int(
            "HMSBUDGET_CURRENCY_PLACES", self.DEFAULT_CURRENCY_PLACES, minimum=0
        )
        self.DEFAULT_STRATEGY = os.getenv("HMSBUDGET_DEFAULT_STRATEGY", "avalanche").strip().lower()
        if self.DEFAULT_STRATEGY not in self.STRATEGIES:
            raise ValueError(
                f"HMSBUDGET_DEFAULT_STRATEGY must be one of {self.STRATEGIES}, "
                f"got {self.DEFAULT_STRATEGY!r}"
            )


class DevConfig(BaseConfig):
    """Development configuration."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration used by the test-suite."""

    __test__ = False

    DEBUG = True
    TESTING = True

    def __init__(self, data_dir: Path | None = None) -> None:
        super().__init__()
        if data_dir is not None:
            self.DATA_DIR = Path(data_dir)


@lru_cache(maxsize=1)
def get_config() -> BaseConfig:
    """Return the process-wide configuration, built once from the environment."""

    return DevConfig()
