"""Exceptions raised by the attribution pipeline.

None of these are fatal to the host: the rebuild task absorbs every one of
them and the visible effect is an absence of highlighting.
"""


class AttributionError(Exception):
    """Base class for attribution pipeline errors."""


class NoHistoryAvailable(AttributionError):
    """The history backend is absent, the document is untracked, or a fetch failed."""


class EmptyOrSingleSnapshot(AttributionError):
    """The history has too few snapshots to distinguish any authorship."""


class EmptyHistory(EmptyOrSingleSnapshot):
    """The history contains no snapshots at all."""


class MalformedSnapshot(AttributionError):
    """A snapshot needed for a diff has no content."""


class DiffInternalInconsistency(AttributionError):
    """An edit script does not reconstruct the contents it was computed from."""
