"""Configuration dataclass and loading utilities.

Provides a strongly-typed configuration object that is injected into the
pipeline and CLI instead of module-level globals. Values come from, in
increasing priority: ``DEFAULT_CONFIG``, the JSON config file and
``RESISTORVISION_*`` environment variables.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict, fields
from typing import Any, Dict, Mapping, Optional
import json, os, logging
from .defaults import DEFAULT_CONFIG
from .env_config import load_environment_config

logger = logging.getLogger(__name__)

_UNIT_INTERVAL_KEYS = (
    "detection_confidence_threshold",
    "detection_iou_threshold",
    "band_confidence_threshold",
    "band_iou_threshold",
)

_POSITIVE_INT_KEYS = ("input_size", "num_proposals", "num_color_classes", "history_size")


@dataclass(slots=True)
class Config:
    # Model input contract
    input_size: int = DEFAULT_CONFIG["input_size"]
    num_proposals: int = DEFAULT_CONFIG["num_proposals"]
    num_color_classes: int = DEFAULT_CONFIG["num_color_classes"]

    # Thresholds (tunable)
    detection_confidence_threshold: float = DEFAULT_CONFIG["detection_confidence_threshold"]
    detection_iou_threshold: float = DEFAULT_CONFIG["detection_iou_threshold"]
    band_confidence_threshold: float = DEFAULT_CONFIG["band_confidence_threshold"]
    band_iou_threshold: float = DEFAULT_CONFIG["band_iou_threshold"]
    strict_class_mapping: bool = DEFAULT_CONFIG["strict_class_mapping"]

    # Models
    models_dir: str = DEFAULT_CONFIG["models_dir"]
    detector_model_path: str = DEFAULT_CONFIG["detector_model_path"]
    classifier_model_path: str = DEFAULT_CONFIG["classifier_model_path"]
    boxes_in_pixels: bool = DEFAULT_CONFIG["boxes_in_pixels"]

    capture_crop_fraction: float = DEFAULT_CONFIG["capture_crop_fraction"]
    history_size: int = DEFAULT_CONFIG["history_size"]
    language: str = DEFAULT_CONFIG["language"]

    # Debug and logging
    debug: bool = DEFAULT_CONFIG["debug"]
    log_level: str = DEFAULT_CONFIG["log_level"]
    log_dir: str = DEFAULT_CONFIG["log_dir"]
    log_to_file: bool = DEFAULT_CONFIG["log_to_file"]
    structured_logging: bool = DEFAULT_CONFIG["structured_logging"]

    # Arbitrary extra values retained for forward compatibility
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        # merge extra keys at top-level for saving
        extra = d.pop("extra", {})
        d.update(extra)
        return d

    def get(self, key: str, default: Any = None) -> Any:
        if key in _FIELD_NAMES:
            return getattr(self, key)
        return self.extra.get(key, default)


_FIELD_NAMES = frozenset(f.name for f in fields(Config) if f.name != "extra")


def load_config(path: str = "config.json", environ: Optional[Mapping[str, str]] = None) -> Config:
    """Load configuration from a JSON file, merged over defaults.

    A missing, empty or malformed file is logged and replaced by defaults;
    invalid values from the file fall back to their default. Environment
    overrides are applied last.

    Args:
        path: Path to config.json file
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        Config: Loaded and validated configuration

    Raises:
        ConfigError: If an environment override has an invalid value
    """
    data: Dict[str, Any] = {}

    if os.path.isfile(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded_data = json.load(f)
            if loaded_data is None:
                logger.warning(f"Configuration file '{path}' is empty, using defaults")
            elif not isinstance(loaded_data, dict):
                logger.error(f"Configuration file '{path}' does not contain a JSON object, using defaults")
            else:
                data = loaded_data
                logger.info(f"Loaded configuration from '{path}'")
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse JSON configuration file '{path}': {e}. Using defaults.")
        except PermissionError:
            logger.error(f"Permission denied reading configuration file '{path}'. Using defaults.")
    else:
        logger.debug(f"Configuration file '{path}' does not exist. Using defaults.")

    merged = {**DEFAULT_CONFIG, **data}
    _validate_values(merged)

    env_config = load_environment_config(environ)
    if env_config.has_overrides:
        merged.update(env_config.overrides)
        logger.debug(f"Applied environment overrides: {sorted(env_config.overrides)}")

    if merged.get("debug"):
        merged["log_level"] = "DEBUG"

    # capture unknown keys
    extra = {k: v for k, v in merged.items() if k not in _FIELD_NAMES}
    if extra:
        logger.info(f"Found extra configuration keys: {list(extra.keys())}")

    return Config(**{k: merged[k] for k in _FIELD_NAMES}, extra=extra)


def save_config(cfg: Config, path: str = "config.json") -> None:
    """Save configuration to a JSON file.

    Raises:
        OSError: If the file cannot be written
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(cfg.to_dict(), f, indent=2, ensure_ascii=False)
    logger.info(f"Configuration saved to '{path}'")


def _validate_values(config_dict: Dict[str, Any]) -> None:
    """Replace out-of-range values from the config file with defaults."""
    for key in _UNIT_INTERVAL_KEYS:
        value = config_dict.get(key)
        if not isinstance(value, (int, float)) or isinstance(value, bool) or not 0.0 <= value <= 1.0:
            logger.warning(f"Setting '{key}'={value!r} must be a number in [0, 1]. Using default.")
            config_dict[key] = DEFAULT_CONFIG[key]

    value = config_dict.get("capture_crop_fraction")
    if not isinstance(value, (int, float)) or isinstance(value, bool) or not 0.0 < value <= 1.0:
        logger.warning(f"Setting 'capture_crop_fraction'={value!r} must be a number in (0, 1]. Using default.")
        config_dict["capture_crop_fraction"] = DEFAULT_CONFIG["capture_crop_fraction"]

    for key in _POSITIVE_INT_KEYS:
        value = config_dict.get(key)
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            logger.warning(f"Setting '{key}'={value!r} must be a positive integer. Using default.")
            config_dict[key] = DEFAULT_CONFIG[key]

    for key in ("models_dir", "detector_model_path", "classifier_model_path", "log_dir"):
        value = config_dict.get(key)
        if not isinstance(value, str) or not value.strip():
            logger.warning(f"Path setting '{key}' is empty or not a string. Using default.")
            config_dict[key] = DEFAULT_CONFIG[key]
