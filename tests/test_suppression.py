import unittest

from yolo_fast_nms.ranking import group_and_rank
from yolo_fast_nms.suppression import suppress, suppress_class
from yolo_fast_nms.types import Candidate


def _cand(cx, cy, w, h, prob, origin, cls=0) -> Candidate:
    return Candidate(cx=cx, cy=cy, w=w, h=h, prob=prob, class_idx=cls, origin_index=origin)


class TestSuppressClass(unittest.TestCase):
    def test_keeps_highest_of_overlapping(self) -> None:
        ranked = [
            _cand(2, 1, 20, 10, 0.7, 0),
            _cand(1, 2, 20, 10, 0.6, 2),
            _cand(0, 0, 20, 10, 0.5, 1),
        ]
        kept = suppress_class(ranked, 0.5)
        self.assertEqual([c.origin_index for c in kept], [0])

    def test_non_overlapping_all_kept(self) -> None:
        ranked = [
            _cand(30, 80, 10, 20, 0.7, 3),
            _cand(20, 60, 10, 20, 0.6, 2),
            _cand(10, 40, 10, 20, 0.5, 1),
            _cand(0, 0, 10, 20, 0.4, 0),
        ]
        self.assertEqual(suppress_class(ranked, 0.5), ranked)

    def test_equal_iou_does_not_suppress(self) -> None:
        # inner sits inside outer with IoU exactly 0.5
        outer = _cand(2, 1, 4, 2, 0.9, 0)
        inner = _cand(1, 1, 2, 2, 0.8, 1)
        self.assertEqual(suppress_class([outer, inner], 0.5), [outer, inner])
        self.assertEqual(suppress_class([outer, inner], 0.49), [outer])

    def test_suppressed_box_does_not_suppress_others(self) -> None:
        # b overlaps a and c, but a and c do not overlap: a suppresses b, c survives.
        a = _cand(0, 0, 10, 10, 0.9, 0)
        b = _cand(4, 0, 10, 10, 0.8, 1)
        c = _cand(8, 0, 10, 10, 0.7, 2)
        self.assertEqual(suppress_class([a, b, c], 0.3), [a, c])

    def test_zero_area_boxes_never_suppress(self) -> None:
        a = _cand(5, 5, 0, 0, 0.9, 0)
        b = _cand(5, 5, 0, 0, 0.8, 1)
        self.assertEqual(suppress_class([a, b], 0.0), [a, b])

    def test_threshold_one_keeps_duplicates(self) -> None:
        a = _cand(5, 5, 2, 2, 0.9, 0)
        b = _cand(5, 5, 2, 2, 0.8, 1)
        self.assertEqual(suppress_class([a, b], 1.0), [a, b])
        self.assertEqual(suppress_class([a, b], 0.99), [a])

    def test_empty(self) -> None:
        self.assertEqual(suppress_class([], 0.5), [])


class TestSuppress(unittest.TestCase):
    def _groups(self):
        cands = []
        origin = 0
        for cls in range(6):
            for k in range(10):
                cands.append(_cand(k * 3.0, cls * 1.0, 10, 10, 0.9 - 0.01 * k, origin, cls=cls))
                origin += 1
        return group_and_rank(cands)

    def test_classes_are_independent(self) -> None:
        a = _cand(5, 5, 10, 10, 0.9, 0, cls=0)
        b = _cand(5, 5, 10, 10, 0.8, 1, cls=1)
        kept = suppress(group_and_rank([a, b]), 0.5)
        self.assertEqual(kept, {0: [a], 1: [b]})

    def test_threaded_matches_sequential(self) -> None:
        groups = self._groups()
        self.assertEqual(suppress(groups, 0.5, workers=4), suppress(groups, 0.5, workers=1))


if __name__ == "__main__":
    unittest.main()
