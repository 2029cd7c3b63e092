"""Pydantic schemas for attribution endpoints."""

from pydantic import BaseModel, Field


class SnapshotSchema(BaseModel):
    """One historical version of a document."""

    timestamp: int = Field(..., description="Modification time in epoch millis")
    author: str
    content: str | None = None


class AttributionRequestSchema(BaseModel):
    """Snapshot history to attribute, in any order."""

    snapshots: list[SnapshotSchema]


class AttributionGroupSchema(BaseModel):
    """A contiguous run of characters by one author."""

    start: int
    end: int
    author: str

    model_config = {"from_attributes": True}


class DecorationSpanSchema(BaseModel):
    """A styled range for the editor to render."""

    start: int
    end: int
    color: str
    author: str
    style: str

    model_config = {"from_attributes": True}


class AttributionResponseSchema(BaseModel):
    """Attribution of the newest snapshot's text."""

    length: int
    groups: list[AttributionGroupSchema]
    spans: list[DecorationSpanSchema]
    transitions_skipped: int = 0


class EditorEventSchema(BaseModel):
    """Editor view update flags."""

    doc_changed: bool = False
    viewport_changed: bool = False


class EditorEventResponseSchema(BaseModel):
    scheduled: bool


class PublishedSpansSchema(BaseModel):
    """Spans currently published for a document."""

    document_id: str
    spans: list[DecorationSpanSchema]
