from __future__ import annotations

from typing import List

import numpy as np

from .layout import GEOMETRY_COLUMNS, DetectionLayout
from .types import Candidate


def extract_candidates(layout: DetectionLayout, prob_threshold: float) -> List[Candidate]:
    """
    One pass over the table: each row contributes at most one Candidate, for its
    best-scoring class, and only if that score is >= `prob_threshold`.

    Class ties resolve to the lowest class index (np.argmax returns the first
    maximum). Candidates come back in ascending row order.
    """

    if layout.rows == 0:
        return []

    table = layout.table()
    scores = table[:, GEOMETRY_COLUMNS:]
    class_ids = np.argmax(scores, axis=1)
    best = scores[np.arange(layout.rows), class_ids]

    # float64, the precision `prob` is returned in: no kept prob is below the threshold.
    keep = np.flatnonzero(best.astype(np.float64) >= prob_threshold)
    if keep.size == 0:
        return []

    boxes = table[keep, :GEOMETRY_COLUMNS]
    return [
        Candidate(
            cx=float(cx),
            cy=float(cy),
            w=float(w),
            h=float(h),
            prob=float(prob),
            class_idx=int(cls_id),
            origin_index=int(i),
        )
        for i, (cx, cy, w, h), prob, cls_id in zip(keep, boxes, best[keep], class_ids[keep])
    ]
