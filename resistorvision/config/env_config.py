"""Environment variable configuration.

Every ``RESISTORVISION_*`` variable overrides the matching key from the
JSON config file. Values are validated here so a bad override fails loudly
instead of silently changing detection behaviour.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

from ..core.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "RESISTORVISION_"

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _parse_unit_float(value: str) -> float:
    number = float(value)
    if not 0.0 <= number <= 1.0:
        raise ValueError(f"{number} is outside [0, 1]")
    return number


def _parse_crop_fraction(value: str) -> float:
    number = float(value)
    if not 0.0 < number <= 1.0:
        raise ValueError(f"{number} is outside (0, 1]")
    return number


def _parse_positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise ValueError(f"{number} is not a positive integer")
    return number


def _parse_log_level(value: str) -> str:
    level = value.strip().upper()
    if level not in VALID_LOG_LEVELS:
        raise ValueError(f"unknown log level {value!r}")
    return level


def _parse_path(value: str) -> str:
    if not value.strip():
        raise ValueError("path cannot be empty")
    return os.path.normpath(value.strip())


# config key -> parser for RESISTORVISION_<KEY upper-cased>
ENV_PARSERS: Dict[str, Callable[[str], Any]] = {
    "log_level": _parse_log_level,
    "log_dir": _parse_path,
    "log_to_file": _parse_bool,
    "structured_logging": _parse_bool,
    "debug": _parse_bool,
    "language": lambda v: v.strip().lower(),
    "models_dir": _parse_path,
    "detector_model_path": _parse_path,
    "classifier_model_path": _parse_path,
    "boxes_in_pixels": _parse_bool,
    "strict_class_mapping": _parse_bool,
    "detection_confidence_threshold": _parse_unit_float,
    "detection_iou_threshold": _parse_unit_float,
    "band_confidence_threshold": _parse_unit_float,
    "band_iou_threshold": _parse_unit_float,
    "capture_crop_fraction": _parse_crop_fraction,
    "history_size": _parse_positive_int,
}


@dataclass(frozen=True)
class EnvironmentConfig:
    """Immutable set of overrides read from the environment."""
    overrides: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_overrides(self) -> bool:
        return bool(self.overrides)


def load_environment_config(environ: Optional[Mapping[str, str]] = None) -> EnvironmentConfig:
    """Collect and validate ``RESISTORVISION_*`` overrides.

    Raises:
        ConfigError: If a variable is set to an invalid value
    """
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}

    for key, parser in ENV_PARSERS.items():
        env_name = ENV_PREFIX + key.upper()
        raw = environ.get(env_name)
        if raw is None:
            continue
        try:
            overrides[key] = parser(raw)
        except ValueError as e:
            raise ConfigError(f"Invalid value for {env_name}: {e}") from e
        logger.debug(f"Environment override {env_name} applied")

    return EnvironmentConfig(overrides=overrides)
