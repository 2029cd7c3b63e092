"""Run-length compression of an attribution buffer into groups."""

from __future__ import annotations

from collections.abc import Iterable

from pipeline.attribution.models import AttributionGroup


def compress_labels(labels: Iterable[str]) -> list[AttributionGroup]:
    """Collapse per-character labels into maximal same-author runs.

    The result is the unique minimal grouping: groups are contiguous, cover
    ``[0, len(labels))`` exactly, and no two neighbours share an author.
    """
    groups: list[AttributionGroup] = []
    run_start = 0
    run_author: str | None = None
    index = 0

    for index, label in enumerate(labels):
        if label != run_author:
            if run_author is not None:
                groups.append(AttributionGroup(run_start, index, run_author))
            run_start = index
            run_author = label

    if run_author is not None:
        groups.append(AttributionGroup(run_start, index + 1, run_author))

    return groups
