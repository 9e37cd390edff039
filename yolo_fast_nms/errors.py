from __future__ import annotations


class NMSError(ValueError):
    """Base class for input validation failures of the NMS engine."""


class ShapeMismatch(NMSError):
    """`rows * columns` does not match the buffer length."""


class InvalidColumns(NMSError):
    """Fewer than 5 columns: no room for a single class score."""


class InvalidThreshold(NMSError):
    """A probability or IoU threshold outside [0, 1]."""
