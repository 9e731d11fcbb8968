"""YOLO backend: Ultralytics weights exported to ONNX, run with OpenCV DNN."""
import logging
import os
from typing import Any, Dict, List

from ..core.exceptions import ModelError
from .base_backend import BaseBackend
from .onnx_backend import OnnxBackend

logger = logging.getLogger(__name__)


def export_to_onnx(weights_path: str, input_size: int) -> str:
    """Export Ultralytics ``.pt`` weights to an ONNX file next to them.

    Returns:
        Path of the exported ``.onnx`` file
    """
    try:
        from ultralytics import YOLO
    except ImportError as e:
        raise ModelError("Ultralytics not installed. Install with: pip install ultralytics") from e

    if not os.path.isfile(weights_path):
        raise ModelError(f"Weights file not found: {weights_path}")

    try:
        model = YOLO(weights_path)
        exported_path = model.export(format="onnx", imgsz=input_size)
    except Exception as e:
        raise ModelError(f"Model export failed for {weights_path}: {e}") from e

    logger.info(f"Exported {weights_path} -> {exported_path}")
    return str(exported_path)


class YoloBackend(OnnxBackend):
    """Backend for Ultralytics YOLO weights.

    ``.pt`` weights are exported once to ONNX (re-used when the export is
    newer than the weights). Ultralytics ONNX heads emit pixel-space boxes,
    so box normalization is always on.
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.boxes_in_pixels = True
        self.weights_path = None

    def load_model(self, model_path: str) -> bool:
        _, ext = os.path.splitext(model_path.lower())
        if ext not in self.get_supported_formats():
            raise ModelError(f"Unsupported YOLO model format '{ext}'")

        onnx_path = model_path
        if ext == '.pt':
            self.weights_path = model_path
            onnx_path = self._cached_export_path(model_path)
            if onnx_path is None:
                onnx_path = export_to_onnx(model_path, self.input_size)

        super().load_model(onnx_path)
        self.model_info.update({'backend': 'ultralytics+opencv-dnn', 'model_type': 'YOLO',
                                'weights_path': self.weights_path})
        return True

    @staticmethod
    def _cached_export_path(weights_path: str):
        candidate = os.path.splitext(weights_path)[0] + '.onnx'
        if os.path.isfile(candidate) and os.path.getmtime(candidate) >= os.path.getmtime(weights_path):
            logger.debug(f"Re-using exported model {candidate}")
            return candidate
        return None

    def get_supported_formats(self) -> List[str]:
        return ['.pt', '.onnx']

    def validate_model(self, model_path: str) -> bool:
        _, ext = os.path.splitext(model_path.lower())
        if ext == '.pt':
            return os.path.isfile(model_path) and os.access(model_path, os.R_OK)
        return super().validate_model(model_path)

    def unload_model(self) -> None:
        self.weights_path = None
        super().unload_model()


def create_backend(model_path: str, config: Dict[str, Any]) -> BaseBackend:
    """Pick a backend for ``model_path`` and load it."""
    _, ext = os.path.splitext(model_path.lower())
    backend: BaseBackend = YoloBackend(config) if ext == '.pt' else OnnxBackend(config)
    backend.load_model(model_path)
    return backend
