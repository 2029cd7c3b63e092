"""Conversion of attribution groups into renderable decoration spans."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from pipeline.attribution.colors import AuthorColorRegistry
from pipeline.attribution.models import AttributionGroup

logger = logging.getLogger(__name__)


class OffsetUnits(StrEnum):
    """Indexing model for emitted offsets."""

    CODEPOINT = "codepoint"
    UTF16 = "utf16"


@dataclass(frozen=True)
class DecorationSpan:
    """A styled range handed to the renderer."""

    start: int
    end: int
    color: str
    author: str
    style: str


def highlight_style(color: str, opacity: float) -> str:
    return f"background-color: {color}; opacity: {opacity};"


def utf16_offsets(content: str) -> list[int]:
    """Map every code point offset (0..len) to its UTF-16 code unit offset."""
    offsets = [0] * (len(content) + 1)
    position = 0
    for i, ch in enumerate(content):
        position += 2 if ord(ch) > 0xFFFF else 1
        offsets[i + 1] = position
    return offsets


def emit_spans(
    groups: Sequence[AttributionGroup],
    registry: AuthorColorRegistry,
    *,
    content: str | None = None,
    opacity: float = 0.5,
    offset_units: OffsetUnits | str = OffsetUnits.CODEPOINT,
) -> list[DecorationSpan]:
    """Resolve colors and styles for each group.

    Group offsets are code points. In UTF-16 mode they are converted using
    the content the groups were computed over. When that content is unknown,
    or any group ends past it, every offset is emitted unchanged.

    Args:
        groups: Attribution groups, sorted and contiguous.
        registry: Color resolver for author labels.
        content: Text of the final snapshot.
        opacity: Highlight opacity for the style string.
        offset_units: Indexing model for the emitted offsets.

    Returns:
        One DecorationSpan per group, in the same order.
    """
    convert: list[int] | None = None
    if OffsetUnits(offset_units) == OffsetUnits.UTF16 and content is not None:
        convert = utf16_offsets(content)
        # All or nothing: one result never mixes indexing models
        if any(group.end >= len(convert) for group in groups):
            logger.warning(
                f"Attribution covers more than the {len(content)} characters "
                "of the final text; emitting code point offsets"
            )
            convert = None

    spans: list[DecorationSpan] = []
    for group in groups:
        start, end = group.start, group.end
        if convert is not None:
            start, end = convert[start], convert[end]
        color = registry.color_for(group.author)
        spans.append(
            DecorationSpan(
                start=start,
                end=end,
                color=color,
                author=group.author,
                style=highlight_style(color, opacity),
            )
        )
    return spans
