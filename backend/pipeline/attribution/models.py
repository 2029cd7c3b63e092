"""Core data types for character-level authorship attribution."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

# Label carried by positions no transition has attributed yet
UNKNOWN_AUTHOR = "_"


@dataclass(frozen=True)
class Snapshot:
    """A full copy of a document at one point in its history.

    Content is None until it has been fetched from the history backend.
    """

    timestamp: int  # modification time, milliseconds since the epoch
    author: str
    content: str | None = None
    uid: str | None = None
    size: int | None = None


@dataclass(frozen=True)
class AttributionGroup:
    """A maximal run of characters attributed to one author.

    Attributes:
        start: First character offset (inclusive).
        end: Last character offset (exclusive).
        author: Author label for every character in the run.
    """

    start: int
    end: int
    author: str

    @property
    def length(self) -> int:
        return self.end - self.start


class AttributionBuffer:
    """Per-character author labels, positionally aligned with one snapshot.

    Every mutator first pads the buffer with UNKNOWN_AUTHOR labels so that the
    range it addresses exists.
    """

    def __init__(self, labels: Iterable[str] | None = None):
        self._labels: list[str] = list(labels) if labels is not None else []

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __getitem__(self, index: int) -> str:
        return self._labels[index]

    def __repr__(self) -> str:
        return f"AttributionBuffer({self._labels!r})"

    @property
    def labels(self) -> list[str]:
        return list(self._labels)

    def ensure_length(self, length: int) -> None:
        """Pad with UNKNOWN_AUTHOR labels up to ``length``."""
        missing = length - len(self._labels)
        if missing > 0:
            self._labels.extend([UNKNOWN_AUTHOR] * missing)

    def resize(self, length: int) -> None:
        """Pad or truncate to exactly ``length`` labels."""
        self.ensure_length(length)
        del self._labels[length:]

    def claim(self, start: int, length: int, author: str) -> None:
        """Label unattributed positions in ``[start, start + length)``.

        Positions that already carry an author keep it.
        """
        self.ensure_length(start + length)
        for i in range(start, start + length):
            if self._labels[i] == UNKNOWN_AUTHOR:
                self._labels[i] = author

    def insert(self, start: int, length: int, author: str) -> None:
        """Splice ``length`` new labels in at ``start``."""
        self.ensure_length(start)
        self._labels[start:start] = [author] * length

    def delete(self, start: int, length: int) -> None:
        """Remove ``length`` labels starting at ``start``."""
        self.ensure_length(start + length)
        del self._labels[start : start + length]
