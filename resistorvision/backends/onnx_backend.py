"""ONNX backend running exported detection heads through OpenCV DNN."""
import logging
import os
from typing import Any, Dict, List

import cv2
import numpy as np

from ..core.constants import INPUT_SIZE
from ..core.entities import PixelBuffer
from ..core.exceptions import ModelError
from .base_backend import BaseBackend

logger = logging.getLogger(__name__)


class OnnxBackend(BaseBackend):
    """Runs an ONNX detection model with ``cv2.dnn``.

    Config keys:
        input_size: Side of the square input the model was exported with
        boxes_in_pixels: True when the head emits box channels in pixels
            (raw Ultralytics exports); they are divided by ``input_size``
            so callers always see normalized boxes
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.net = None
        self.model_path = None
        self.input_size = int(config.get("input_size", INPUT_SIZE))
        self.boxes_in_pixels = bool(config.get("boxes_in_pixels", False))

    def load_model(self, model_path: str) -> bool:
        """Load an ONNX model from disk."""
        if not os.path.isfile(model_path):
            raise ModelError(f"Model file not found: {model_path}")

        try:
            self.net = cv2.dnn.readNetFromONNX(model_path)
        except cv2.error as e:
            self.is_loaded = False
            raise ModelError(f"Failed to load ONNX model {model_path}: {e}") from e

        self.model_path = model_path
        self.is_loaded = True
        self.model_info = {
            'backend': 'opencv-dnn',
            'model_type': 'ONNX',
            'model_path': model_path,
            'input_size': self.input_size,
            'boxes_in_pixels': self.boxes_in_pixels,
        }
        logger.info(f"Loaded ONNX model: {model_path}")
        return True

    def infer(self, buffer: PixelBuffer) -> np.ndarray:
        """Run the network on ``buffer`` and return the flat channel-major output."""
        if not self.is_loaded or self.net is None:
            raise ModelError("No model loaded")
        if buffer.side != self.input_size:
            raise ModelError(f"Model expects {self.input_size}px input, got {buffer.side}px")

        try:
            self.net.setInput(buffer.to_blob())
            output = np.asarray(self.net.forward(), dtype=np.float32)
        except cv2.error as e:
            raise ModelError(f"ONNX inference failed: {e}") from e

        return self._to_channel_major(output)

    def _to_channel_major(self, output: np.ndarray) -> np.ndarray:
        if output.ndim == 3:
            rows = output[0]
            # (proposals, channels) layouts have far more rows than channels
            if rows.shape[0] > rows.shape[1]:
                rows = rows.T
            if self.boxes_in_pixels:
                rows = rows.copy()
                rows[:4] /= float(self.input_size)
            return np.ascontiguousarray(rows).reshape(-1)

        if self.boxes_in_pixels:
            logger.warning(f"Cannot normalize boxes of output shaped {output.shape}")
        return output.reshape(-1)

    def get_model_info(self) -> Dict[str, Any]:
        if not self.is_loaded:
            return {'status': 'not_loaded'}
        return self.model_info.copy()

    def get_supported_formats(self) -> List[str]:
        return ['.onnx']

    def validate_model(self, model_path: str) -> bool:
        """Check extension and that OpenCV can parse the file."""
        _, ext = os.path.splitext(model_path.lower())
        if ext not in self.get_supported_formats() or not os.path.isfile(model_path):
            return False
        try:
            cv2.dnn.readNetFromONNX(model_path)
            return True
        except cv2.error:
            return False

    def unload_model(self) -> None:
        self.net = None
        self.model_path = None
        super().unload_model()
