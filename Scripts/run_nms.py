from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict

import numpy as np

from yolo_fast_nms import NMSConfig, NMSEngine, load_nms_config


def _build_config(args: argparse.Namespace) -> NMSConfig:
    cfg = load_nms_config(args.config) if args.config else NMSConfig()
    overrides: Dict[str, Any] = {}
    if args.conf is not None:
        overrides["prob_threshold"] = args.conf
    if args.iou is not None:
        overrides["iou_threshold"] = args.iou
    if args.transpose is not None:
        overrides["transpose"] = args.transpose
    if args.workers is not None:
        overrides["workers"] = args.workers
    return replace(cfg, **overrides)


def main() -> int:
    parser = argparse.ArgumentParser(description="Run NMS on a saved detector output (.npy).")
    parser.add_argument("tensor", help="Path to a .npy array shaped (rows, cols), (cols, rows) or (1, ...).")
    parser.add_argument("--config", default=None, help="JSON file with NMS options.")
    parser.add_argument("--conf", type=float, default=None, help="prob_threshold (overrides config).")
    parser.add_argument("--iou", type=float, default=None, help="iou_threshold (overrides config).")
    layout = parser.add_mutually_exclusive_group()
    layout.add_argument("--transpose", dest="transpose", action="store_true", default=None, help="Input is (cols, rows).")
    layout.add_argument("--no-transpose", dest="transpose", action="store_false", default=None, help="Input is (rows, cols).")
    parser.add_argument("--workers", type=int, default=None, help="Threads for per-class suppression.")
    parser.add_argument("--out", default=None, help="Write detections JSON here instead of stdout.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")

    tensor_path = Path(args.tensor)
    if not tensor_path.exists():
        raise FileNotFoundError(f"Tensor file not found: {tensor_path}")
    tensor = np.load(tensor_path)

    cfg = _build_config(args)
    detections = NMSEngine(cfg).run_array(tensor)

    payload = json.dumps([d.as_list() for d in detections])
    if args.out:
        Path(args.out).write_text(payload, encoding="utf-8")
        print(f"wrote {len(detections)} detections to {args.out}")
    else:
        sys.stdout.write(payload + "\n")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
