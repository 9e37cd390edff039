from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Mapping, Sequence

import numpy as np

from .geometry import iou_one_to_many
from .types import Candidate


LOGGER = logging.getLogger(__name__)


def suppress_class(ranked: Sequence[Candidate], iou_threshold: float) -> List[Candidate]:
    """
    Greedy NMS over one class. `ranked` must already be in descending confidence.

    A candidate is dropped when its IoU with any already kept candidate is
    strictly greater than `iou_threshold`.
    """

    kept: List[Candidate] = []
    kept_boxes = np.empty((len(ranked), 4), dtype=np.float64)

    for c in ranked:
        box = c.as_cxcywh()
        if kept:
            ious = iou_one_to_many(box, kept_boxes[: len(kept)])
            if np.any(ious > iou_threshold):
                continue
        kept_boxes[len(kept)] = box
        kept.append(c)

    return kept


def suppress(
    groups: Mapping[int, Sequence[Candidate]],
    iou_threshold: float,
    workers: int = 1,
) -> Dict[int, List[Candidate]]:
    """
    Run `suppress_class` on every class group. Classes are independent, so with
    `workers > 1` they are spread over a thread pool; the result is the same.
    """

    class_ids = sorted(groups)
    if workers <= 1 or len(class_ids) <= 1:
        result = {cls_id: suppress_class(groups[cls_id], iou_threshold) for cls_id in class_ids}
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {cls_id: pool.submit(suppress_class, groups[cls_id], iou_threshold) for cls_id in class_ids}
            result = {cls_id: futures[cls_id].result() for cls_id in class_ids}

    LOGGER.debug(
        "NMS kept %d of %d candidates across %d classes",
        sum(len(v) for v in result.values()),
        sum(len(groups[c]) for c in class_ids),
        len(class_ids),
    )
    return result
