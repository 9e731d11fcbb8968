"""Default configuration values."""

from typing import Any, Dict

from ..core import constants

DEFAULT_CONFIG: Dict[str, Any] = {
    # Model input contract
    "input_size": constants.INPUT_SIZE,
    "num_proposals": constants.NUM_PROPOSALS,
    "num_color_classes": constants.NUM_COLOR_CLASSES,

    # Stage 1: resistor localization
    "detection_confidence_threshold": constants.CONFIDENCE_THRESHOLD,  # 0.0 to 1.0
    "detection_iou_threshold": constants.IOU_THRESHOLD,  # 0.0 to 1.0

    # Stage 2: band detection
    "band_confidence_threshold": constants.CONFIDENCE_THRESHOLD,
    "band_iou_threshold": constants.IOU_THRESHOLD,
    "strict_class_mapping": False,  # raise on unknown class ids instead of falling back

    # Models
    "models_dir": "models",
    "detector_model_path": "models/resistor_detector.onnx",
    "classifier_model_path": "models/band_colors.onnx",
    "boxes_in_pixels": False,  # True for raw Ultralytics ONNX exports

    # Photo normalization
    "capture_crop_fraction": constants.CAPTURE_CROP_FRACTION,

    # History
    "history_size": 10,

    # General Application Settings
    "language": "en",

    # Debug and Logging Settings
    "debug": False,
    "log_level": "INFO",
    "log_dir": "logs",
    "log_to_file": False,
    "structured_logging": False,
}
