"""Unit tests for configuration loading and saving."""
import json

import pytest

from resistorvision.config.defaults import DEFAULT_CONFIG
from resistorvision.config.env_config import load_environment_config
from resistorvision.config.settings import Config, load_config, save_config
from resistorvision.core.exceptions import ConfigError


class TestLoadConfig:
    """Test suite for load_config."""

    def test_missing_file_uses_defaults(self, temp_dir):
        config = load_config(str(temp_dir / "missing.json"), environ={})

        assert config.band_confidence_threshold == DEFAULT_CONFIG["band_confidence_threshold"]
        assert config.num_proposals == 8400
        assert config.num_color_classes == 12
        assert config.input_size == 640
        assert config.extra == {}

    def test_file_values_override_defaults(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"band_confidence_threshold": 0.45, "language": "pl"}), encoding="utf-8")

        config = load_config(str(path), environ={})

        assert config.band_confidence_threshold == 0.45
        assert config.language == "pl"
        assert config.detection_iou_threshold == DEFAULT_CONFIG["detection_iou_threshold"]

    def test_malformed_json_uses_defaults(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text("{not json", encoding="utf-8")

        config = load_config(str(path), environ={})

        assert config.to_dict() == Config().to_dict()

    def test_non_object_json_uses_defaults(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        assert load_config(str(path), environ={}).history_size == 10

    @pytest.mark.parametrize("key,value", [
        ("band_iou_threshold", 1.5),
        ("detection_confidence_threshold", "high"),
        ("num_proposals", 0),
        ("history_size", True),
        ("detector_model_path", ""),
        ("capture_crop_fraction", 0),
        ("capture_crop_fraction", -0.2),
        ("history_size", -3),
    ])
    def test_invalid_values_fall_back(self, temp_dir, key, value):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({key: value}), encoding="utf-8")

        config = load_config(str(path), environ={})

        assert getattr(config, key) == DEFAULT_CONFIG[key]

    def test_environment_overrides_file(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"band_confidence_threshold": 0.45}), encoding="utf-8")

        config = load_config(str(path), environ={
            "RESISTORVISION_BAND_CONFIDENCE_THRESHOLD": "0.6",
            "RESISTORVISION_STRICT_CLASS_MAPPING": "yes",
        })

        assert config.band_confidence_threshold == pytest.approx(0.6)
        assert config.strict_class_mapping is True

    def test_invalid_environment_value(self, temp_dir):
        with pytest.raises(ConfigError):
            load_config(str(temp_dir / "missing.json"),
                        environ={"RESISTORVISION_DETECTION_IOU_THRESHOLD": "2"})

    def test_debug_forces_debug_logging(self, temp_dir):
        config = load_config(str(temp_dir / "missing.json"), environ={"RESISTORVISION_DEBUG": "true"})

        assert config.log_level == "DEBUG"

    def test_unknown_keys_are_kept(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"camera_index": 2}), encoding="utf-8")

        config = load_config(str(path), environ={})

        assert config.extra == {"camera_index": 2}
        assert config.get("camera_index") == 2
        assert config.get("history_size") == 10
        assert config.get("unknown", "fallback") == "fallback"


class TestSaveConfig:
    """Test suite for save_config."""

    def test_round_trip(self, temp_dir):
        path = temp_dir / "nested" / "config.json"
        original = Config(band_iou_threshold=0.4, language="pl", extra={"camera_index": 1})

        save_config(original, str(path))
        loaded = load_config(str(path), environ={})

        assert loaded.band_iou_threshold == 0.4
        assert loaded.language == "pl"
        assert loaded.extra == {"camera_index": 1}

    def test_saved_file_is_flat_json(self, temp_dir):
        path = temp_dir / "config.json"

        save_config(Config(extra={"camera_index": 1}), str(path))
        data = json.loads(path.read_text(encoding="utf-8"))

        assert data["camera_index"] == 1
        assert "extra" not in data


class TestEnvironmentConfig:
    """Test suite for environment overrides."""

    def test_no_variables(self):
        assert not load_environment_config({}).has_overrides

    def test_parses_types(self):
        env = load_environment_config({
            "RESISTORVISION_LOG_LEVEL": "warning",
            "RESISTORVISION_HISTORY_SIZE": "5",
            "RESISTORVISION_LOG_TO_FILE": "0",
            "UNRELATED": "x",
        })

        assert env.overrides == {"log_level": "WARNING", "history_size": 5, "log_to_file": False}

    @pytest.mark.parametrize("name,value", [
        ("RESISTORVISION_LOG_LEVEL", "LOUD"),
        ("RESISTORVISION_DEBUG", "maybe"),
        ("RESISTORVISION_HISTORY_SIZE", "ten"),
        ("RESISTORVISION_MODELS_DIR", "  "),
        ("RESISTORVISION_CAPTURE_CROP_FRACTION", "0"),
        ("RESISTORVISION_HISTORY_SIZE", "0"),
        ("RESISTORVISION_HISTORY_SIZE", "-4"),
    ])
    def test_rejects_bad_values(self, name, value):
        with pytest.raises(ConfigError):
            load_environment_config({name: value})


class TestCaptureAndHistoryLimits:
    """Values that downstream code cannot use never leave load_config."""

    def test_full_frame_crop_is_allowed(self, temp_dir):
        config = load_config(str(temp_dir / "missing.json"),
                             environ={"RESISTORVISION_CAPTURE_CROP_FRACTION": "1.0"})

        assert config.capture_crop_fraction == 1.0

    def test_zero_history_from_environment(self, temp_dir):
        with pytest.raises(ConfigError, match="HISTORY_SIZE"):
            load_config(str(temp_dir / "missing.json"), environ={"RESISTORVISION_HISTORY_SIZE": "0"})

    def test_zero_crop_from_file_uses_default(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"capture_crop_fraction": 0}), encoding="utf-8")

        config = load_config(str(path), environ={})

        assert config.capture_crop_fraction == DEFAULT_CONFIG["capture_crop_fraction"]
