"""Character-level authorship attribution from document snapshot history."""

from pipeline.attribution.engine import AttributionResult, attribute_snapshots
from pipeline.attribution.models import (
    UNKNOWN_AUTHOR,
    AttributionBuffer,
    AttributionGroup,
    Snapshot,
)

__all__ = [
    "UNKNOWN_AUTHOR",
    "AttributionBuffer",
    "AttributionGroup",
    "AttributionResult",
    "Snapshot",
    "attribute_snapshots",
]
