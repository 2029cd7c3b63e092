"""Attribution endpoint: snapshot list in, groups and spans out."""

from fastapi import APIRouter

from app.config import settings
from app.schemas.attribution import (
    AttributionGroupSchema,
    AttributionRequestSchema,
    AttributionResponseSchema,
    DecorationSpanSchema,
)
from pipeline.attribution.colors import get_color_registry
from pipeline.attribution.emitter import emit_spans
from pipeline.attribution.engine import attribute_snapshots
from pipeline.attribution.errors import EmptyOrSingleSnapshot
from pipeline.attribution.models import Snapshot

router = APIRouter()


@router.post("/")
async def attribute(request: AttributionRequestSchema) -> AttributionResponseSchema:
    """Attribute the newest snapshot's text to the authors in its history."""
    snapshots = [
        Snapshot(timestamp=s.timestamp, author=s.author, content=s.content)
        for s in request.snapshots
    ]
    try:
        result = attribute_snapshots(snapshots)
    except EmptyOrSingleSnapshot:
        return AttributionResponseSchema(length=0, groups=[], spans=[])

    spans = emit_spans(
        result.groups,
        get_color_registry(),
        content=result.content,
        opacity=settings.highlight_opacity,
        offset_units=settings.offset_units,
    )
    return AttributionResponseSchema(
        length=result.length,
        groups=[AttributionGroupSchema.model_validate(g) for g in result.groups],
        spans=[DecorationSpanSchema.model_validate(s) for s in spans],
        transitions_skipped=result.report.pairs_skipped,
    )
