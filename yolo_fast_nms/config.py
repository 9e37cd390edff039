from __future__ import annotations

import json
import math
import numbers
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Union

from .errors import InvalidThreshold


PathLike = Union[str, Path]

# Accepted for compatibility with callers that pass the class count explicitly;
# it is always derived from the column count.
_IGNORED_OPTIONS = {"classes_count"}


def validate_threshold(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidThreshold(f"{name} must be a number, got {value!r}")
    value = float(value)
    if math.isnan(value) or value < 0.0 or value > 1.0:
        raise InvalidThreshold(f"{name} must be in [0, 1], got {value}")
    return value


@dataclass(frozen=True)
class NMSConfig:
    """
    Options for a single NMS call.

    - prob_threshold: rows whose best class score is below this are dropped
    - iou_threshold: a candidate is suppressed when its IoU with an already kept
      box of the same class is strictly greater than this
    - transpose: True when the table is laid out as (columns, rows), e.g. 84 x 8400
    - workers: threads used for per-class suppression (1 = sequential)
    """

    prob_threshold: float = 0.25
    iou_threshold: float = 0.5
    transpose: bool = True
    workers: int = 1

    def __post_init__(self) -> None:
        # Stored as plain floats; NumPy scalars are accepted.
        object.__setattr__(self, "prob_threshold", validate_threshold("prob_threshold", self.prob_threshold))
        object.__setattr__(self, "iou_threshold", validate_threshold("iou_threshold", self.iou_threshold))
        if not isinstance(self.transpose, bool):
            raise ValueError("transpose must be a boolean")
        if isinstance(self.workers, bool) or not isinstance(self.workers, int) or self.workers < 1:
            raise ValueError("workers must be an integer >= 1")

    @classmethod
    def from_options(cls, **options: Any) -> "NMSConfig":
        """
        Merge keyword options over the defaults.

            NMSConfig.from_options(prob_threshold=0.4, transpose=False)
        """

        allowed = {f.name for f in fields(cls)}
        unknown = sorted(k for k in options if k not in allowed and k not in _IGNORED_OPTIONS)
        if unknown:
            raise ValueError(f"Unknown NMS options: {unknown}")
        merged = {k: v for k, v in options.items() if k in allowed}
        return replace(cls(), **merged)


def _require_bool(payload: Dict[str, Any], key: str) -> bool:
    value = payload[key]
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be a boolean")
    return value


def load_nms_config(path: PathLike) -> NMSConfig:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"NMS config not found: {path}")
    raw = path.read_text(encoding="utf-8")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid NMS config JSON: {path}") from exc
    if not isinstance(payload, dict):
        raise ValueError("NMS config must be a JSON object")

    allowed = {f.name for f in fields(NMSConfig)}
    unknown = sorted(set(payload.keys()) - allowed)
    if unknown:
        raise ValueError(f"Unknown NMS config keys: {unknown}")

    options: Dict[str, Any] = {}
    for key in ("prob_threshold", "iou_threshold"):
        if key in payload:
            options[key] = validate_threshold(key, payload[key])
    if "transpose" in payload:
        options["transpose"] = _require_bool(payload, "transpose")
    if "workers" in payload:
        workers = payload["workers"]
        if isinstance(workers, bool) or not isinstance(workers, int):
            raise ValueError("workers must be an integer")
        options["workers"] = workers

    return NMSConfig.from_options(**options)
