"""Pairwise diff attribution across authorship boundaries.

For every transition between two authors, diffs the last snapshot of the
outgoing run against the last snapshot of the incoming run and replays the
resulting edit script into a shared per-character label buffer.

Replay policy at a transition:
    equal     positions keep the author they already carry; positions that
              were never attributed are claimed by the outgoing author.
    inserted  new positions are spliced in and labeled with the incoming
              author.
    deleted   positions are removed; the cursor does not move.

After a successful replay the buffer is aligned with the incoming snapshot,
which is also the outgoing snapshot of the next transition. Later
transitions override earlier ones where they insert (last-write-wins).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum

from diff_match_patch import diff_match_patch

from pipeline.attribution.errors import DiffInternalInconsistency, MalformedSnapshot
from pipeline.attribution.models import AttributionBuffer, Snapshot
from pipeline.attribution.segmenter import boundary_pairs

logger = logging.getLogger(__name__)


class EditOp(StrEnum):
    """Kind of run in a character-level edit script."""

    EQUAL = "equal"
    INSERTED = "inserted"
    DELETED = "deleted"


_DMP_OPS = {
    diff_match_patch.DIFF_EQUAL: EditOp.EQUAL,
    diff_match_patch.DIFF_INSERT: EditOp.INSERTED,
    diff_match_patch.DIFF_DELETE: EditOp.DELETED,
}


@dataclass(frozen=True)
class EditRun:
    """One run of an edit script."""

    op: EditOp
    text: str

    @property
    def length(self) -> int:
        return len(self.text)


@dataclass
class PairOutcome:
    """What happened at one authorship transition."""

    outgoing_index: int
    incoming_index: int
    outgoing_author: str
    incoming_author: str
    applied: bool
    reason: str | None = None  # why the pair was skipped


@dataclass
class AttributionReport:
    """Summary of a full attribution pass.

    Attributes:
        pairs_applied: Transitions whose edit script was replayed.
        pairs_skipped: Transitions skipped because of missing content or an
            inconsistent edit script.
        outcomes: Per-transition detail, in processing order.
    """

    pairs_applied: int = 0
    pairs_skipped: int = 0
    outcomes: list[PairOutcome] = field(default_factory=list)


# =============================================================================
# Edit scripts
# =============================================================================


def compute_edit_script(before: str, after: str) -> list[EditRun]:
    """Compute a minimal character-level edit script from ``before`` to ``after``.

    Uses diff-match-patch's Myers bisection with line mode off and no
    timeout, so the result is exact rather than a time-bounded
    approximation.
    """
    dmp = diff_match_patch()
    dmp.Diff_Timeout = 0
    diffs = dmp.diff_main(before, after, False)
    return [EditRun(_DMP_OPS[op], text) for op, text in diffs if text]


def verify_edit_script(script: Sequence[EditRun], before: str, after: str) -> None:
    """Check that an edit script reconstructs both of its contents.

    Raises:
        DiffInternalInconsistency: If equal+deleted runs do not rebuild
            ``before`` or equal+inserted runs do not rebuild ``after``.
    """
    rebuilt_before = "".join(r.text for r in script if r.op != EditOp.INSERTED)
    rebuilt_after = "".join(r.text for r in script if r.op != EditOp.DELETED)

    if rebuilt_before != before:
        raise DiffInternalInconsistency(
            f"Edit script rebuilds {len(rebuilt_before)} chars of earlier "
            f"content, expected {len(before)}"
        )
    if rebuilt_after != after:
        raise DiffInternalInconsistency(
            f"Edit script rebuilds {len(rebuilt_after)} chars of later "
            f"content, expected {len(after)}"
        )


def replay_edit_script(
    buffer: AttributionBuffer,
    script: Sequence[EditRun],
    outgoing_author: str,
    incoming_author: str,
) -> None:
    """Replay an edit script into the buffer with a cursor starting at 0."""
    offset = 0
    for run in script:
        if run.op == EditOp.EQUAL:
            buffer.claim(offset, run.length, outgoing_author)
            offset += run.length
        elif run.op == EditOp.INSERTED:
            buffer.insert(offset, run.length, incoming_author)
            offset += run.length
        else:
            buffer.delete(offset, run.length)


# =============================================================================
# Transitions
# =============================================================================


def attribute_pair(
    buffer: AttributionBuffer,
    outgoing: Snapshot,
    incoming: Snapshot,
) -> None:
    """Replay one authorship transition into the buffer.

    A transition between snapshots by the same author is a no-op.

    Raises:
        MalformedSnapshot: If either snapshot has no content.
        DiffInternalInconsistency: If the edit script fails verification.
    """
    if outgoing.author == incoming.author:
        return
    for snapshot in (outgoing, incoming):
        if snapshot.content is None:
            raise MalformedSnapshot(
                f"Snapshot {snapshot.uid or snapshot.timestamp} has no content"
            )

    script = compute_edit_script(outgoing.content, incoming.content)
    verify_edit_script(script, outgoing.content, incoming.content)
    replay_edit_script(buffer, script, outgoing.author, incoming.author)


def attribute_history(
    snapshots: Sequence[Snapshot],
    boundaries: Sequence[int],
) -> tuple[AttributionBuffer, AttributionReport]:
    """Build the attribution buffer for an ordered history.

    Transitions are processed earliest first. A transition that cannot be
    replayed is skipped and the buffer is resized to the incoming snapshot's
    length (when known) so later transitions stay positionally valid.

    Args:
        snapshots: Snapshots ordered oldest-first.
        boundaries: Run boundaries from ``find_run_boundaries``.

    Returns:
        Tuple of (buffer aligned with the final run's snapshot, report).
    """
    buffer = AttributionBuffer()
    report = AttributionReport()

    for outgoing_index, incoming_index in boundary_pairs(boundaries):
        outgoing = snapshots[outgoing_index]
        incoming = snapshots[incoming_index]
        outcome = PairOutcome(
            outgoing_index=outgoing_index,
            incoming_index=incoming_index,
            outgoing_author=outgoing.author,
            incoming_author=incoming.author,
            applied=False,
        )

        try:
            attribute_pair(buffer, outgoing, incoming)
        except (MalformedSnapshot, DiffInternalInconsistency) as e:
            logger.warning(
                f"Skipping transition {outgoing_index} -> {incoming_index} "
                f"({outgoing.author} -> {incoming.author}): {e}"
            )
            outcome.reason = str(e)
            report.pairs_skipped += 1
            if incoming.content is not None:
                buffer.resize(len(incoming.content))
        else:
            outcome.applied = True
            report.pairs_applied += 1

        report.outcomes.append(outcome)

    return buffer, report
