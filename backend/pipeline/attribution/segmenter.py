"""Change-run segmentation over an ordered snapshot list."""

from __future__ import annotations

from collections.abc import Sequence

from pipeline.attribution.models import Snapshot


def find_run_boundaries(snapshots: Sequence[Snapshot]) -> list[int]:
    """Find the indices where authorship changes.

    Scans left to right, comparing each snapshot's author with the author
    who started the current run. Every index where they differ starts a new
    run. The returned list always ends with ``len(snapshots)`` as a sentinel.

    Examples:
        authors A A B B A -> [2, 4, 5]
        authors A         -> [1]

    Args:
        snapshots: Snapshots ordered oldest-first.

    Returns:
        Strictly increasing boundary indices ending with the list length.
    """
    boundaries: list[int] = []
    if snapshots:
        run_author = snapshots[0].author
        for index in range(1, len(snapshots)):
            author = snapshots[index].author
            if author != run_author:
                boundaries.append(index)
                run_author = author

    boundaries.append(len(snapshots))
    return boundaries


def boundary_pairs(boundaries: Sequence[int]) -> list[tuple[int, int]]:
    """Pair up consecutive boundaries as ``(outgoing, incoming)`` indices.

    Each boundary ``b`` names the run that ends just before it, so the pair
    ``(b_i, b_i+1)`` maps to snapshot indices ``(b_i - 1, b_i+1 - 1)``: the
    last snapshot of the outgoing run and the last snapshot of the incoming
    run.
    """
    return [
        (boundaries[i] - 1, boundaries[i + 1] - 1) for i in range(len(boundaries) - 1)
    ]
