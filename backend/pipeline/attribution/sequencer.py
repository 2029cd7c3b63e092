"""Snapshot sequencing: put a raw history into oldest-first order."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pipeline.attribution.errors import EmptyHistory
from pipeline.attribution.models import Snapshot

logger = logging.getLogger(__name__)


def sequence_snapshots(snapshots: Iterable[Snapshot]) -> list[Snapshot]:
    """Order snapshots oldest-first by timestamp.

    The sort is stable, so snapshots sharing a timestamp keep the relative
    order they arrived in.

    Args:
        snapshots: Snapshots in any order (backends usually return newest-first).

    Returns:
        A new list ordered by ascending timestamp.

    Raises:
        EmptyHistory: If there are no snapshots.
    """
    ordered = sorted(snapshots, key=lambda s: s.timestamp)
    if not ordered:
        raise EmptyHistory("History contains no snapshots")

    logger.debug(
        f"Sequenced {len(ordered)} snapshots "
        f"({ordered[0].timestamp} .. {ordered[-1].timestamp})"
    )
    return ordered
