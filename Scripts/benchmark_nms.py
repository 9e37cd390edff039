from __future__ import annotations

import argparse
import logging
import statistics
import time
from dataclasses import dataclass
from typing import List

import numpy as np

from yolo_fast_nms import NMSConfig, NMSEngine


@dataclass(frozen=True)
class TimingSummary:
    n: int
    mean_ms: float
    p50_ms: float
    p90_ms: float
    p95_ms: float


def _percentile(sorted_values: List[float], q: float) -> float:
    if not sorted_values:
        raise ValueError("No values provided.")
    if q < 0.0 or q > 100.0:
        raise ValueError("q must be in [0, 100].")
    if len(sorted_values) == 1:
        return float(sorted_values[0])
    # Linear interpolation between closest ranks.
    pos = (q / 100.0) * (len(sorted_values) - 1)
    lo = int(np.floor(pos))
    hi = int(np.ceil(pos))
    if lo == hi:
        return float(sorted_values[lo])
    t = pos - lo
    return float(sorted_values[lo] * (1.0 - t) + sorted_values[hi] * t)


def _summarize_ms(values_s: List[float]) -> TimingSummary:
    ms_sorted = sorted(v * 1000.0 for v in values_s)
    return TimingSummary(
        n=len(ms_sorted),
        mean_ms=float(statistics.fmean(ms_sorted)) if ms_sorted else 0.0,
        p50_ms=_percentile(ms_sorted, 50.0) if ms_sorted else 0.0,
        p90_ms=_percentile(ms_sorted, 90.0) if ms_sorted else 0.0,
        p95_ms=_percentile(ms_sorted, 95.0) if ms_sorted else 0.0,
    )


def _format_summary(label: str, s: TimingSummary) -> str:
    return (
        f"{label}: n={s.n} mean={s.mean_ms:.3f}ms p50={s.p50_ms:.3f}ms "
        f"p90={s.p90_ms:.3f}ms p95={s.p95_ms:.3f}ms"
    )


def make_synthetic_output(rows: int, classes: int, seed: int = 0) -> np.ndarray:
    """
    (4 + classes, rows) float32 table, like a YOLOv8 export. Boxes are
    clustered so that suppression has real work to do.
    """

    rng = np.random.default_rng(seed)
    centers = rng.uniform(0, 640, size=(max(rows // 20, 1), 2))
    pick = rng.integers(0, centers.shape[0], size=rows)
    cxcy = centers[pick] + rng.normal(0, 4, size=(rows, 2))
    wh = rng.uniform(20, 120, size=(rows, 2))
    scores = rng.uniform(0.0, 0.3, size=(rows, classes))
    hot = rng.integers(0, classes, size=rows)
    scores[np.arange(rows), hot] = rng.uniform(0.0, 1.0, size=rows)
    table = np.concatenate([cxcy, wh, scores], axis=1).astype(np.float32)
    return np.ascontiguousarray(table.T)


def _time_engine(engine: NMSEngine, output: np.ndarray, warmup: int, repeats: int) -> List[float]:
    for _ in range(warmup):
        engine.run_array(output)
    samples: List[float] = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        engine.run_array(output)
        samples.append(time.perf_counter() - t0)
    return samples


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Benchmark NMS latency on a synthetic detector output (sequential vs threaded suppression)."
    )
    parser.add_argument("--rows", type=int, default=8400, help="Detection candidates (anchors).")
    parser.add_argument("--classes", type=int, default=80, help="Number of class score columns.")
    parser.add_argument("--conf", type=float, default=0.25, help="prob_threshold.")
    parser.add_argument("--iou", type=float, default=0.5, help="iou_threshold.")
    parser.add_argument("--workers", type=int, default=4, help="Threads for the threaded run.")
    parser.add_argument("--warmup", type=int, default=5, help="Warmup runs, not recorded.")
    parser.add_argument("--repeats", type=int, default=50, help="Recorded runs.")
    parser.add_argument("--seed", type=int, default=0, help="RNG seed for the synthetic output.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()

    if args.rows < 1:
        raise ValueError("--rows must be >= 1")
    if args.classes < 1:
        raise ValueError("--classes must be >= 1")
    if args.warmup < 0:
        raise ValueError("--warmup must be >= 0")
    if args.repeats < 1:
        raise ValueError("--repeats must be >= 1")

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")

    output = make_synthetic_output(args.rows, args.classes, seed=args.seed)
    base = NMSConfig(prob_threshold=args.conf, iou_threshold=args.iou, transpose=True)
    sequential = NMSEngine(base)
    threaded = NMSEngine(NMSConfig(base.prob_threshold, base.iou_threshold, base.transpose, workers=args.workers))

    kept_seq = sequential.run_array(output)
    kept_thr = threaded.run_array(output)
    if kept_seq != kept_thr:
        raise RuntimeError("Threaded suppression returned a different result than sequential.")

    seq_s = _summarize_ms(_time_engine(sequential, output, args.warmup, args.repeats))
    thr_s = _summarize_ms(_time_engine(threaded, output, args.warmup, args.repeats))

    print(f"output shape={output.shape} kept={len(kept_seq)}")
    print(_format_summary("nms_sequential", seq_s))
    print(_format_summary(f"nms_threads_{args.workers}", thr_s))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
