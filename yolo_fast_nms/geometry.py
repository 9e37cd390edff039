"""
Center-form box geometry.

Boxes are `(cx, cy, w, h)`. Corners are cx -/+ w/2 and cy -/+ h/2. IoU is
defined as 0 when the union area is 0, so zero-area boxes never overlap
anything.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np


Box = Sequence[float]


def to_corners(cx: float, cy: float, w: float, h: float) -> Tuple[float, float, float, float]:
    return cx - w / 2, cy - h / 2, cx + w / 2, cy + h / 2


def area(box: Box) -> float:
    _, _, w, h = box
    return w * h


def intersection_area(a: Box, b: Box) -> float:
    ax1, ay1, ax2, ay2 = to_corners(*a)
    bx1, by1, bx2, by2 = to_corners(*b)
    inter_w = max(0.0, min(ax2, bx2) - max(ax1, bx1))
    inter_h = max(0.0, min(ay2, by2) - max(ay1, by1))
    return inter_w * inter_h


def union_area(a: Box, b: Box) -> float:
    return area(a) + area(b) - intersection_area(a, b)


def iou(a: Box, b: Box) -> float:
    inter = intersection_area(a, b)
    union = area(a) + area(b) - inter
    if union <= 0:
        return 0.0
    return inter / union


def iou_one_to_many(box: Box, boxes: np.ndarray) -> np.ndarray:
    """
    IoU between one box and an (N, 4) array of boxes, all in cx, cy, w, h.
    Same arithmetic as `iou()`, vectorised.
    """

    boxes = np.asarray(boxes, dtype=np.float64).reshape(-1, 4)
    cx, cy, w, h = (float(v) for v in box)
    x1, y1, x2, y2 = to_corners(cx, cy, w, h)

    bx1 = boxes[:, 0] - boxes[:, 2] / 2
    by1 = boxes[:, 1] - boxes[:, 3] / 2
    bx2 = boxes[:, 0] + boxes[:, 2] / 2
    by2 = boxes[:, 1] + boxes[:, 3] / 2

    inter_w = np.maximum(0.0, np.minimum(x2, bx2) - np.maximum(x1, bx1))
    inter_h = np.maximum(0.0, np.minimum(y2, by2) - np.maximum(y1, by1))
    inter = inter_w * inter_h
    union = w * h + boxes[:, 2] * boxes[:, 3] - inter

    out = np.zeros_like(inter)
    np.divide(inter, union, out=out, where=union > 0)
    return out
