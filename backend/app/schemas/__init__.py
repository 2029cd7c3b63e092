"""Pydantic schemas module.

Request/response models for the API. Pipeline dataclasses are converted
with ``model_validate`` (``from_attributes``) at the route layer.
"""

from app.schemas.attribution import (
    AttributionGroupSchema,
    AttributionRequestSchema,
    AttributionResponseSchema,
    DecorationSpanSchema,
    EditorEventResponseSchema,
    EditorEventSchema,
    PublishedSpansSchema,
    SnapshotSchema,
)

__all__ = [
    "AttributionGroupSchema",
    "AttributionRequestSchema",
    "AttributionResponseSchema",
    "DecorationSpanSchema",
    "EditorEventResponseSchema",
    "EditorEventSchema",
    "PublishedSpansSchema",
    "SnapshotSchema",
]
