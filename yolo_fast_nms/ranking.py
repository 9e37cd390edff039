from __future__ import annotations

from typing import Dict, Iterable, List

from .types import Candidate


def _rank_key(c: Candidate):
    return (-c.prob, c.origin_index)


def rank(candidates: Iterable[Candidate]) -> List[Candidate]:
    """Highest probability first; equal probabilities keep buffer order."""

    return sorted(candidates, key=_rank_key)


def group_by_class(candidates: Iterable[Candidate]) -> Dict[int, List[Candidate]]:
    groups: Dict[int, List[Candidate]] = {}
    for c in candidates:
        groups.setdefault(c.class_idx, []).append(c)
    return groups


def group_and_rank(candidates: Iterable[Candidate]) -> Dict[int, List[Candidate]]:
    return {cls_id: rank(group) for cls_id, group in group_by_class(candidates).items()}
