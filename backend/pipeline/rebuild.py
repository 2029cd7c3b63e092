"""Per-document attribution rebuilds triggered by editor events.

A rebuild fetches the document's history, runs the attribution pipeline,
and publishes the resulting decoration spans. Rebuilds are single-flight per
document: a new trigger cancels the running rebuild, and a generation check
drops any result that was superseded before it could be published.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass

from pipeline.attribution.colors import AuthorColorRegistry, get_color_registry
from pipeline.attribution.emitter import DecorationSpan, OffsetUnits, emit_spans
from pipeline.attribution.engine import attribute_snapshots
from pipeline.attribution.errors import EmptyOrSingleSnapshot, NoHistoryAvailable
from pipeline.sync.client import HistoryBackend, fetch_snapshots

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditorUpdate:
    """An editor view update for one document."""

    document_id: str
    doc_changed: bool = False
    viewport_changed: bool = False


def should_rebuild(update: EditorUpdate) -> bool:
    """Rebuild when the document text or the visible viewport changed."""
    return update.doc_changed or update.viewport_changed


class RebuildCoordinator:
    """Runs and publishes attribution rebuilds, one live rebuild per document."""

    def __init__(
        self,
        backend: HistoryBackend | None,
        registry: AuthorColorRegistry | None = None,
        opacity: float = 0.5,
        offset_units: OffsetUnits | str = OffsetUnits.CODEPOINT,
    ):
        self.backend = backend
        self.registry = registry
        self.opacity = opacity
        self.offset_units = OffsetUnits(offset_units)
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._generations: dict[str, int] = {}
        self._published: dict[str, list[DecorationSpan]] = {}

    # =========================================================================
    # Triggers
    # =========================================================================

    def handle_update(self, update: EditorUpdate) -> bool:
        """Start a rebuild if the update warrants one.

        Returns:
            True if a rebuild was scheduled.
        """
        if not should_rebuild(update):
            return False
        self.trigger(update.document_id)
        return True

    def trigger(self, document_id: str) -> asyncio.Task[None]:
        """Start a rebuild, cancelling any rebuild still running for the document."""
        previous = self._tasks.get(document_id)
        if previous is not None and not previous.done():
            logger.debug(f"Cancelling superseded rebuild for {document_id}")
            previous.cancel()

        generation = self._generations.get(document_id, 0) + 1
        self._generations[document_id] = generation

        task = asyncio.create_task(self._run(document_id, generation))
        self._tasks[document_id] = task
        task.add_done_callback(lambda t: self._forget(document_id, t))
        return task

    async def wait(self, document_id: str) -> None:
        """Wait for the document's current rebuild, if any, to finish."""
        task = self._tasks.get(document_id)
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def discard(self, document_id: str) -> None:
        """Forget a closed document: cancel its rebuild and drop its spans."""
        task = self._tasks.pop(document_id, None)
        self._generations.pop(document_id, None)
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        if document_id in self._published:
            published = dict(self._published)
            del published[document_id]
            self._published = published
        logger.debug(f"Discarded attribution state for {document_id}")

    async def close(self) -> None:
        """Cancel all running rebuilds."""
        tasks = [t for t in self._tasks.values() if not t.done()]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    # =========================================================================
    # Published state
    # =========================================================================

    def published(self, document_id: str) -> list[DecorationSpan]:
        """Return the spans most recently published for a document."""
        return list(self._published.get(document_id, []))

    # =========================================================================
    # Rebuild
    # =========================================================================

    async def rebuild(self, document_id: str) -> list[DecorationSpan]:
        """Fetch, attribute, and emit spans for a document.

        Raises:
            NoHistoryAvailable: If the history cannot be fetched.
        """
        snapshots = await fetch_snapshots(self.backend, document_id)

        try:
            result = attribute_snapshots(snapshots)
        except EmptyOrSingleSnapshot:
            logger.info(f"No history to attribute for {document_id}")
            return []

        return emit_spans(
            result.groups,
            self.registry or get_color_registry(),
            content=result.content,
            opacity=self.opacity,
            offset_units=self.offset_units,
        )

    async def _run(self, document_id: str, generation: int) -> None:
        try:
            spans = await self.rebuild(document_id)
        except NoHistoryAvailable as e:
            logger.info(f"Attribution skipped for {document_id}: {e}")
            spans = []
        except Exception as e:
            logger.warning(f"Attribution rebuild failed for {document_id}: {e}")
            spans = []

        if self._generations.get(document_id) != generation:
            logger.debug(f"Dropping stale rebuild {generation} for {document_id}")
            return

        # Publish with one assignment so readers never see a partial update
        self._published = {**self._published, document_id: spans}
        logger.info(f"Published {len(spans)} spans for {document_id}")

    def _forget(self, document_id: str, task: asyncio.Task[None]) -> None:
        if self._tasks.get(document_id) is task:
            del self._tasks[document_id]
