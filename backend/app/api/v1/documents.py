"""Document endpoints: editor events in, published highlight spans out."""

from fastapi import APIRouter, Depends

from app.core.state import get_rebuild_coordinator
from app.schemas.attribution import (
    DecorationSpanSchema,
    EditorEventResponseSchema,
    EditorEventSchema,
    PublishedSpansSchema,
)
from pipeline.rebuild import EditorUpdate, RebuildCoordinator

router = APIRouter()


@router.post("/{document_id:path}/events")
async def editor_event(
    document_id: str,
    event: EditorEventSchema,
    coordinator: RebuildCoordinator = Depends(get_rebuild_coordinator),
) -> EditorEventResponseSchema:
    """Report an editor update; schedules a rebuild on text or viewport change."""
    update = EditorUpdate(
        document_id=document_id,
        doc_changed=event.doc_changed,
        viewport_changed=event.viewport_changed,
    )
    return EditorEventResponseSchema(scheduled=coordinator.handle_update(update))


@router.get("/{document_id:path}/attribution")
async def published_attribution(
    document_id: str,
    coordinator: RebuildCoordinator = Depends(get_rebuild_coordinator),
) -> PublishedSpansSchema:
    """Return the spans most recently published for a document."""
    spans = coordinator.published(document_id)
    return PublishedSpansSchema(
        document_id=document_id,
        spans=[DecorationSpanSchema.model_validate(s) for s in spans],
    )


@router.delete("/{document_id:path}", status_code=204)
async def close_document(
    document_id: str,
    coordinator: RebuildCoordinator = Depends(get_rebuild_coordinator),
) -> None:
    """Report that the editor closed a document; drops its published spans."""
    await coordinator.discard(document_id)
