import unittest

import numpy as np

from yolo_fast_nms.errors import InvalidColumns, ShapeMismatch
from yolo_fast_nms.layout import DetectionLayout


def _table(rows: int, columns: int) -> np.ndarray:
    # value at (i, j) = 100 * i + j, easy to read back
    return (100 * np.arange(rows)[:, None] + np.arange(columns)[None, :]).astype(np.float32)


class TestDetectionLayout(unittest.TestCase):
    def test_row_major(self) -> None:
        table = _table(3, 6)
        layout = DetectionLayout.from_buffer(table.reshape(-1), rows=3, columns=6, transpose=False)
        self.assertEqual(layout.classes_count, 2)
        self.assertEqual(layout.offset(2, 5), 2 * 6 + 5)
        self.assertEqual(layout.value(2, 5), 205.0)
        geometry, scores = layout.row(1)
        self.assertTrue(np.array_equal(geometry, [100, 101, 102, 103]))
        self.assertTrue(np.array_equal(scores, [104, 105]))

    def test_transposed(self) -> None:
        table = _table(3, 6)
        buffer = np.ascontiguousarray(table.T).reshape(-1)  # (columns, rows) layout
        layout = DetectionLayout.from_buffer(buffer, rows=3, columns=6, transpose=True)
        self.assertEqual(layout.offset(2, 5), 5 * 3 + 2)
        self.assertEqual(layout.value(2, 5), 205.0)
        self.assertTrue(np.array_equal(layout.table(), table))
        geometry, scores = layout.row(2)
        self.assertTrue(np.array_equal(geometry, [200, 201, 202, 203]))
        self.assertTrue(np.array_equal(scores, [204, 205]))

    def test_bytes_buffer(self) -> None:
        table = _table(2, 5)
        layout = DetectionLayout.from_buffer(table.tobytes(), rows=2, columns=5, transpose=False)
        self.assertTrue(np.array_equal(layout.table(), table))

    def test_bytes_not_float32_multiple(self) -> None:
        with self.assertRaises(ShapeMismatch):
            DetectionLayout.from_buffer(b"\x00" * 7, rows=1, columns=5, transpose=False)

    def test_shape_mismatch(self) -> None:
        with self.assertRaises(ShapeMismatch):
            DetectionLayout.from_buffer(np.zeros(10, dtype=np.float32), rows=2, columns=6, transpose=False)

    def test_non_flat_buffer_rejected(self) -> None:
        with self.assertRaises(ShapeMismatch):
            DetectionLayout.from_buffer(np.zeros((2, 6), dtype=np.float32), rows=2, columns=6, transpose=False)

    def test_invalid_columns(self) -> None:
        with self.assertRaises(InvalidColumns):
            DetectionLayout.from_buffer(np.zeros(12, dtype=np.float32), rows=3, columns=4, transpose=False)

    def test_negative_rows(self) -> None:
        with self.assertRaises(ValueError):
            DetectionLayout.from_buffer([], rows=-1, columns=5, transpose=False)

    def test_empty_buffer(self) -> None:
        layout = DetectionLayout.from_buffer([], rows=0, columns=84, transpose=True)
        self.assertEqual(layout.table().shape, (0, 84))

    def test_buffer_is_never_written(self) -> None:
        buffer = _table(2, 5).reshape(-1)
        layout = DetectionLayout.from_buffer(buffer, rows=2, columns=5, transpose=False)
        self.assertFalse(layout.table().flags.writeable)
        self.assertTrue(buffer.flags.writeable)
        with self.assertRaises(ValueError):
            layout.table()[0, 0] = 1.0

    def test_out_of_range(self) -> None:
        layout = DetectionLayout.from_buffer(_table(2, 5).reshape(-1), rows=2, columns=5, transpose=False)
        with self.assertRaises(IndexError):
            layout.offset(2, 0)
        with self.assertRaises(IndexError):
            layout.row(-1)

    def test_from_array_shapes(self) -> None:
        table = _table(4, 10)
        plain = DetectionLayout.from_array(table, transpose=False)
        self.assertEqual((plain.rows, plain.columns), (4, 10))

        transposed = DetectionLayout.from_array(table.T, transpose=True)
        self.assertEqual((transposed.rows, transposed.columns), (4, 10))
        self.assertTrue(np.array_equal(transposed.table(), table))

        batched = DetectionLayout.from_array(table.T[None, ...], transpose=True)
        self.assertTrue(np.array_equal(batched.table(), table))

    def test_from_array_bad_shape(self) -> None:
        with self.assertRaises(ShapeMismatch):
            DetectionLayout.from_array(np.zeros((2, 3, 10)), transpose=False)
        with self.assertRaises(ShapeMismatch):
            DetectionLayout.from_array(np.zeros(10), transpose=False)


if __name__ == "__main__":
    unittest.main()
