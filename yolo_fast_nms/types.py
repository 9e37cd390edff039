from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class Detection:
    """
    Final detection in center form, as returned to the caller.
    """

    cx: float
    cy: float
    w: float
    h: float
    prob: float
    class_idx: int

    def as_list(self) -> List[float]:
        # class_idx is carried as a float so the record is uniform.
        return [self.cx, self.cy, self.w, self.h, self.prob, float(self.class_idx)]

    def as_cxcywh(self) -> Tuple[float, float, float, float]:
        return self.cx, self.cy, self.w, self.h

    def as_xyxy(self) -> Tuple[float, float, float, float]:
        half_w = self.w / 2
        half_h = self.h / 2
        return self.cx - half_w, self.cy - half_h, self.cx + half_w, self.cy + half_h


@dataclass(frozen=True)
class Candidate:
    """
    A thresholded detection row still eligible for suppression.

    `origin_index` is the row position in the input table; it only breaks ties
    while ranking and is dropped by `as_detection()`.
    """

    cx: float
    cy: float
    w: float
    h: float
    prob: float
    class_idx: int
    origin_index: int

    def as_cxcywh(self) -> Tuple[float, float, float, float]:
        return self.cx, self.cy, self.w, self.h

    def as_detection(self) -> Detection:
        return Detection(
            cx=self.cx,
            cy=self.cy,
            w=self.w,
            h=self.h,
            prob=self.prob,
            class_idx=self.class_idx,
        )
