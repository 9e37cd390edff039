from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np

from .errors import InvalidColumns, ShapeMismatch


# cx, cy, w, h
GEOMETRY_COLUMNS = 4
MIN_COLUMNS = GEOMETRY_COLUMNS + 1


def _as_flat_float32(buffer: Any) -> np.ndarray:
    if isinstance(buffer, (bytes, bytearray, memoryview)):
        itemsize = np.dtype(np.float32).itemsize
        if len(buffer) % itemsize != 0:
            raise ShapeMismatch(
                f"Binary size ({len(buffer)}) is not a multiple of the float32 size ({itemsize})"
            )
        data = np.frombuffer(buffer, dtype=np.float32)
    else:
        data = np.asarray(buffer, dtype=np.float32)
        if data.ndim != 1:
            raise ShapeMismatch(f"Expected a flat buffer, got shape {data.shape}")

    # Read-only view: the caller's buffer is borrowed, never written.
    data = data.view()
    data.flags.writeable = False
    return data


@dataclass(frozen=True, eq=False)
class DetectionLayout:
    """
    Logical view of a flat detection table.

    Row `i` is one detection candidate: 4 geometry values (cx, cy, w, h)
    followed by `classes_count` class scores.

    - transpose=False: buffer is (rows, columns), row i at offset i * columns
    - transpose=True: buffer is (columns, rows), value (i, j) at offset j * rows + i
    """

    data: np.ndarray
    rows: int
    columns: int
    transpose: bool

    @classmethod
    def from_buffer(cls, buffer: Any, rows: int, columns: int, transpose: bool) -> "DetectionLayout":
        if rows < 0:
            raise ValueError(f"rows must be >= 0, got {rows}")
        if columns < MIN_COLUMNS:
            raise InvalidColumns(
                f"columns must be >= {MIN_COLUMNS} (4 bbox values + at least one class), got {columns}"
            )
        data = _as_flat_float32(buffer)
        if data.size != rows * columns:
            raise ShapeMismatch(
                f"Buffer length ({data.size}) does not match rows * columns ({rows} * {columns})"
            )
        return cls(data=data, rows=int(rows), columns=int(columns), transpose=bool(transpose))

    @classmethod
    def from_array(cls, tensor: Any, transpose: bool) -> "DetectionLayout":
        """
        Accepts a detector output shaped (rows, columns) or (1, rows, columns).
        With transpose=True the two dimensions are read as (columns, rows),
        e.g. (84, 8400) for an 80-class model.
        """

        arr = np.asarray(tensor, dtype=np.float32)
        if arr.ndim == 3 and arr.shape[0] == 1:
            arr = arr[0]
        if arr.ndim != 2:
            raise ShapeMismatch(f"Invalid tensor shape {arr.shape}; expected (rows, columns) or (1, rows, columns)")

        if transpose:
            columns, rows = arr.shape
        else:
            rows, columns = arr.shape
        return cls.from_buffer(np.ascontiguousarray(arr).reshape(-1), rows, columns, transpose)

    @property
    def classes_count(self) -> int:
        return self.columns - GEOMETRY_COLUMNS

    @property
    def row_stride(self) -> int:
        return 1 if self.transpose else self.columns

    @property
    def column_stride(self) -> int:
        return self.rows if self.transpose else 1

    def offset(self, i: int, j: int) -> int:
        if not (0 <= i < self.rows and 0 <= j < self.columns):
            raise IndexError(f"({i}, {j}) out of range for {self.rows} x {self.columns} table")
        return i * self.row_stride + j * self.column_stride

    def value(self, i: int, j: int) -> float:
        return float(self.data[self.offset(i, j)])

    def table(self) -> np.ndarray:
        """
        (rows, columns) read-only view over the buffer. Strided when transposed;
        never copies.
        """

        if self.transpose:
            return self.data.reshape(self.columns, self.rows).T
        return self.data.reshape(self.rows, self.columns)

    def row(self, i: int) -> Tuple[np.ndarray, np.ndarray]:
        """Return (geometry, scores) views for row `i`."""

        if not 0 <= i < self.rows:
            raise IndexError(f"row {i} out of range for {self.rows} rows")
        r = self.table()[i]
        return r[:GEOMETRY_COLUMNS], r[GEOMETRY_COLUMNS:]
