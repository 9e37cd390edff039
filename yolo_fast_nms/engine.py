from __future__ import annotations

import logging
from typing import Any, List

from .config import NMSConfig
from .extract import extract_candidates
from .layout import DetectionLayout
from .ranking import group_and_rank
from .suppression import suppress
from .types import Detection


LOGGER = logging.getLogger(__name__)


class NMSEngine:
    """
    Confidence thresholding + per-class greedy NMS for YOLO-style outputs.

    Supported input (single image):
    - (rows, columns) with transpose=False: [cx, cy, w, h, class_scores...] per row
    - (columns, rows) with transpose=True: e.g. 84 x 8400 for YOLOv8 COCO exports
    - either of the above with a leading batch axis of 1

    The engine keeps no state between calls; one instance may be shared
    across threads.
    """

    def __init__(self, cfg: NMSConfig = NMSConfig()):
        self.cfg = cfg

    def run_buffer(self, buffer: Any, rows: int, columns: int) -> List[Detection]:
        """
        Args:
            buffer: flat float32 data (array-like or raw native-endian bytes)
            rows: number of detection candidates
            columns: 4 + number of classes
        """

        layout = DetectionLayout.from_buffer(buffer, rows, columns, self.cfg.transpose)
        return self.process(layout)

    def run_array(self, tensor: Any) -> List[Detection]:
        layout = DetectionLayout.from_array(tensor, self.cfg.transpose)
        return self.process(layout)

    def process(self, layout: DetectionLayout) -> List[Detection]:
        candidates = extract_candidates(layout, self.cfg.prob_threshold)
        LOGGER.debug(
            "%d of %d rows above prob_threshold=%.3f (%d classes)",
            len(candidates),
            layout.rows,
            self.cfg.prob_threshold,
            layout.classes_count,
        )
        if not candidates:
            return []

        groups = group_and_rank(candidates)
        kept = suppress(groups, self.cfg.iou_threshold, workers=self.cfg.workers)

        return [c.as_detection() for cls_id in sorted(kept) for c in kept[cls_id]]


def run(tensor: Any, **options: Any) -> List[List[float]]:
    """
    Run NMS on a detector output array and return `[cx, cy, w, h, prob, class_idx]` lists.

    Options (merged over the defaults):
        prob_threshold (0.25), iou_threshold (0.5), transpose (True), workers (1)

    Example:
        dets = run(output, prob_threshold=0.4, iou_threshold=0.5)
    """

    cfg = NMSConfig.from_options(**options)
    return [d.as_list() for d in NMSEngine(cfg).run_array(tensor)]


def run_with_buffer(
    buffer: Any,
    prob_threshold: float,
    iou_threshold: float,
    rows: int,
    columns: int,
    transpose: bool,
) -> List[List[float]]:
    cfg = NMSConfig(prob_threshold=prob_threshold, iou_threshold=iou_threshold, transpose=transpose)
    return [d.as_list() for d in NMSEngine(cfg).run_buffer(buffer, rows, columns)]


def run_with_binary(
    binary: bytes,
    prob_threshold: float,
    iou_threshold: float,
    rows: int,
    columns: int,
    transpose: bool,
) -> List[List[float]]:
    """
    Same as `run_with_buffer` for a raw binary of native-endian float32 values,
    e.g. `ndarray.astype(np.float32).tobytes()`.
    """

    if not isinstance(binary, (bytes, bytearray, memoryview)):
        raise TypeError(f"binary must be bytes-like, got {type(binary).__name__}")
    return run_with_buffer(binary, prob_threshold, iou_threshold, rows, columns, transpose)
