"""Band recognition pipeline services."""

from .tensor_decoder import decode_proposals
from .nms import non_max_suppression
from .band_classifier import BandColorClassifier, CentroidColorClassifier, ModelClassColorMapper
from .band_sequencer import BandSequencingResult, sequence_bands
from .resistance_decoder import decode_resistance, format_ohms, format_resistance
from .swatch_analyzer import SwatchAnalyzer, SwatchResult, Region, ColorCalibration
from .history import DetectionHistory, HistoryEntry
from .scan_pipeline import ResistorScanPipeline, PipelineSettings

__all__ = [
    "decode_proposals", "non_max_suppression",
    "BandColorClassifier", "CentroidColorClassifier", "ModelClassColorMapper",
    "BandSequencingResult", "sequence_bands",
    "decode_resistance", "format_ohms", "format_resistance",
    "SwatchAnalyzer", "SwatchResult", "Region", "ColorCalibration",
    "DetectionHistory", "HistoryEntry",
    "ResistorScanPipeline", "PipelineSettings"
]
