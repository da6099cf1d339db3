"""Configuration Loader - load, validate and surface warnings for ValidatorConfig.

Invariants:
    - load(None) raises ConfigRequiredError, a missing file raises ConfigNotFoundError;
      the two are never conflated
    - Parse and structural failures raise ConfigInvalidError wrapping the cause
    - load() logs exactly one summary line on success
    - validate_and_warn() reports every warning and never fails because of them

Design Decisions:
    - read_config() is the structural-only path (no existence pre-check, no summary,
      no warnings) used by the rental bootstrap
    - Warnings go through the injected Reporter, not the logger: they are for the
      operator at the terminal
"""

import logging
import tomllib
from pathlib import Path

from pydantic import ValidationError

from validator.core.errors import (
    ConfigInvalidError, ConfigNotFoundError, ConfigRequiredError,
)
from validator.core.reporting import Reporter
from validator.core.validator_config import ValidatorConfig

logger = logging.getLogger(__name__)


def read_config(path: Path) -> ValidatorConfig:
    """Parse a config file into ValidatorConfig, mapping failures to config errors."""
    try:
        return ValidatorConfig.from_toml(path)
    except FileNotFoundError:
        raise ConfigNotFoundError(str(path))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError, ValidationError) as e:
        raise ConfigInvalidError(f"Failed to parse configuration {path}", e) from e


def summarize(config: ValidatorConfig) -> str:
    return (
        f"Configuration loaded: "
        f"burn_uid={config.emission.burn_uid}, "
        f"burn_percentage={config.emission.burn_percentage:.2f}%, "
        f"weight_interval_blocks={config.emission.weight_set_interval_blocks}, "
        f"netuid={config.bittensor.netuid}, "
        f"network={config.bittensor.network}"
    )


class ConfigLoader:
    """Loads config documents for handlers that run the validator."""

    def __init__(self, reporter: Reporter):
        self._reporter = reporter

    def load(self, path: Path | str | None) -> ValidatorConfig:
        if path is None:
            raise ConfigRequiredError(
                "Configuration file path is required for validator operation",
            )
        path = Path(path)
        if not path.exists():
            raise ConfigNotFoundError(str(path))

        logger.info(f"Loading configuration from: {path}")
        config = read_config(path)
        logger.info(
            summarize(config),
            extra={
                "netuid": config.bittensor.netuid,
                "network": config.bittensor.network,
            },
        )
        return config

    def validate_and_warn(self, config: ValidatorConfig) -> None:
        try:
            config.check()
        except ValueError as e:
            raise ConfigInvalidError("Configuration validation failed", e) from e

        for warning in config.warnings():
            self._reporter.warning(f"Configuration warning: {warning}")
