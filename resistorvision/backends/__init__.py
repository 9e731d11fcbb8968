"""Backend implementations for different model types."""

from .base_backend import BaseBackend
from .onnx_backend import OnnxBackend
from .yolo_backend import YoloBackend, create_backend

__all__ = ["BaseBackend", "OnnxBackend", "YoloBackend", "create_backend"]
