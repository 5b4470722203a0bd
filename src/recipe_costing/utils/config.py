"""
Runtime configuration for Recipe Costing.

Settings come from environment variables, read once when the Config is built:

- RECIPE_COSTING_ENV: "production" (default) keeps the database under the
  user's Documents folder; "development" keeps it in the project's data/
- RECIPE_COSTING_CURRENCY_SYMBOL: prefix for formatted amounts (default "$")
- RECIPE_COSTING_CURRENCY_DECIMALS: decimal places for formatted totals (default 2)
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .constants import (
    APP_NAME,
    APP_VERSION,
    DATABASE_FILENAME,
    DATABASE_VERSION,
    DEFAULT_CURRENCY_DECIMALS,
    DEFAULT_CURRENCY_SYMBOL,
)

logger = logging.getLogger(__name__)

ENV_VAR_ENVIRONMENT = "RECIPE_COSTING_ENV"
ENV_VAR_CURRENCY_SYMBOL = "RECIPE_COSTING_CURRENCY_SYMBOL"
ENV_VAR_CURRENCY_DECIMALS = "RECIPE_COSTING_CURRENCY_DECIMALS"

PRODUCTION_DIR_NAME = "RecipeCosting"


class Config:
    """
    Database location and display settings for one environment.

    Building a Config touches no files; call ensure_directories() before
    opening the database.
    """

    def __init__(self, environment: str = "production"):
        """
        Args:
            environment: 'production' or 'development'
        """
        self.environment = environment

        if environment == "development":
            self._data_dir = Path(__file__).resolve().parents[3] / "data"
        else:
            self._data_dir = Path.home() / "Documents" / PRODUCTION_DIR_NAME
        self._database_path = self._data_dir / DATABASE_FILENAME

        self._currency_symbol = os.environ.get(ENV_VAR_CURRENCY_SYMBOL, DEFAULT_CURRENCY_SYMBOL)
        self._currency_decimals = self._read_int_env(
            ENV_VAR_CURRENCY_DECIMALS, DEFAULT_CURRENCY_DECIMALS
        )

    @staticmethod
    def _read_int_env(name: str, default: int) -> int:
        """Read a non-negative integer from the environment; warn and use default otherwise."""
        raw = os.environ.get(name)
        if raw is None:
            return default
        try:
            value = int(raw)
        except ValueError:
            value = -1
        if value < 0:
            logger.warning(f"Invalid {name}={raw!r}, using default {default}")
            return default
        return value

    def ensure_directories(self) -> None:
        """Create the data directory if it doesn't exist."""
        self._data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def app_name(self) -> str:
        return APP_NAME

    @property
    def app_version(self) -> str:
        return APP_VERSION

    @property
    def database_version(self) -> str:
        return DATABASE_VERSION

    @property
    def database_path(self) -> Path:
        """Full path to the SQLite file."""
        return self._database_path

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the SQLite file, always with forward slashes."""
        return "sqlite:///" + str(self._database_path).replace("\\", "/")

    @property
    def currency_symbol(self) -> str:
        return self._currency_symbol

    @property
    def currency_decimals(self) -> int:
        return self._currency_decimals

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def database_exists(self) -> bool:
        """True once the SQLite file has been created."""
        return self._database_path.exists()

    def __repr__(self) -> str:
        return f"Config(environment='{self.environment}', database_path='{self._database_path}')"


_config_instance: Optional[Config] = None


def get_config(environment: Optional[str] = None) -> Config:
    """
    Return the process-wide Config, building it on first call.

    Args:
        environment: Environment for the first build; when None, read from
            RECIPE_COSTING_ENV (default production). A different value passed
            after the first build is ignored with a warning.

    Returns:
        Config instance
    """
    global _config_instance

    if _config_instance is None:
        if environment is None:
            environment = os.environ.get(ENV_VAR_ENVIRONMENT, "production")
        _config_instance = Config(environment)
    elif environment is not None and environment != _config_instance.environment:
        logger.warning(
            f"get_config() called with environment='{environment}' but the config "
            f"was already built for '{_config_instance.environment}'. "
            f"Returning existing singleton."
        )

    return _config_instance


def reset_config() -> None:
    """Forget the process-wide Config so the next get_config() rebuilds it (for tests)."""
    global _config_instance
    _config_instance = None


def get_database_url() -> str:
    """Database URL of the process-wide Config."""
    return get_config().database_url
