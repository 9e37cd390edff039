"""
Fast confidence filtering + Non-Maximum Suppression for YOLO-style outputs.

Takes the raw (rows, columns) / (columns, rows) detection table of a model,
each row being [cx, cy, w, h, class_scores...], and returns the surviving
[cx, cy, w, h, prob, class_idx] detections. NumPy only.
"""

from .types import Candidate, Detection
from .errors import InvalidColumns, InvalidThreshold, NMSError, ShapeMismatch
from .config import NMSConfig, load_nms_config
from .layout import DetectionLayout
from .geometry import iou
from .engine import NMSEngine, run, run_with_binary, run_with_buffer

__all__ = [
    "Candidate",
    "Detection",
    "NMSError",
    "ShapeMismatch",
    "InvalidColumns",
    "InvalidThreshold",
    "NMSConfig",
    "load_nms_config",
    "DetectionLayout",
    "iou",
    "NMSEngine",
    "run",
    "run_with_buffer",
    "run_with_binary",
]
