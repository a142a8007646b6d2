# tests/_determinism.py
from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from typing import Any

from pipeline.planner import DocumentPlan


def shuffled(seq: Sequence[Any], *, seed: int = 12345) -> list[Any]:
    """
    Return a deterministically shuffled copy of seq.
    """
    out = list(seq)
    rng = random.Random(seed)
    rng.shuffle(out)
    return out


def canonical_plan(entries: Iterable[DocumentPlan]) -> list[tuple[str, str, tuple[str, ...]]]:
    """
    Order-free view of planned documents: (source, canonical, sorted links),
    sorted. Two plans over the same documents compare equal whatever order
    the documents were processed in.
    """
    rows = [
        (
            entry.source.as_posix(),
            entry.canonical.as_posix(),
            tuple(sorted(link.as_posix() for link in entry.links)),
        )
        for entry in entries
    ]
    rows.sort()
    return rows
