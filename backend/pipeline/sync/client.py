"""Client for the document synchronization backend's version history."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from pipeline.attribution.errors import NoHistoryAvailable
from pipeline.attribution.models import Snapshot

logger = logging.getLogger(__name__)

# =============================================================================
# Sync backend API
# =============================================================================
# GET {base}/history?path=<document id>
#     -> {"items": [{"uid": ..., "device": ..., "mtime": ..., "size": ...}]}
#     "items" may be missing or null for untracked documents.
# GET {base}/content/<uid>
#     -> raw bytes of the document at that version (UTF-8)
# =============================================================================

DEFAULT_TIMEOUT = 10.0


def _safe_int(value: Any) -> int | None:
    """Safely convert a value to int, returning None if not possible."""
    if value is None:
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


@dataclass(frozen=True)
class HistoryItem:
    """One version entry from the backend's history listing."""

    uid: str
    author: str
    modified_time_millis: int
    size: int | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> HistoryItem:
        """Create from a history item; the backend names the author ``device``."""
        return cls(
            uid=str(data.get("uid", "")),
            author=str(data.get("device") or data.get("author") or ""),
            modified_time_millis=_safe_int(data.get("mtime")) or 0,
            size=_safe_int(data.get("size")),
        )


class HistoryBackend(Protocol):
    """Anything that can list a document's versions and fetch their content."""

    async def get_history(self, document_id: str) -> list[HistoryItem]: ...

    async def get_content(self, uid: str) -> str: ...


class SyncHistoryClient:
    """HTTP client for the synchronization backend."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Root URL of the sync backend.
            timeout: HTTP request timeout in seconds.
            transport: Optional httpx transport (tests pass a MockTransport).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def get_history(self, document_id: str) -> list[HistoryItem]:
        """List the versions recorded for a document.

        Args:
            document_id: Document path as known to the backend.

        Returns:
            History items in backend order (usually newest first).

        Raises:
            NoHistoryAvailable: If the request fails or the document is untracked.
        """
        url = f"{self.base_url}/history"
        try:
            async with self._client() as client:
                response = await client.get(url, params={"path": document_id})
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise NoHistoryAvailable(
                f"History request for {document_id} failed: "
                f"HTTP {e.response.status_code}"
            ) from e
        except (httpx.RequestError, ValueError) as e:
            raise NoHistoryAvailable(
                f"History request for {document_id} failed: {e}"
            ) from e

        items = (data.get("items") if isinstance(data, dict) else None) or []
        logger.debug(f"Fetched {len(items)} history items for {document_id}")
        return [HistoryItem.from_api_response(item) for item in items]

    async def get_content(self, uid: str) -> str:
        """Fetch one version's content, decoded as UTF-8.

        Undecodable bytes become U+FFFD rather than failing the fetch.

        Raises:
            httpx.HTTPError: If the request fails.
        """
        url = f"{self.base_url}/content/{uid}"
        async with self._client() as client:
            response = await client.get(url)
            response.raise_for_status()
        return response.content.decode("utf-8", errors="replace")


async def fetch_snapshots(
    backend: HistoryBackend | None,
    document_id: str,
) -> list[Snapshot]:
    """Fetch a document's history with every version's content.

    Content fetches run concurrently. A version whose content cannot be
    fetched is kept with ``content=None`` so only the transitions that need
    it are skipped.

    Args:
        backend: History backend, or None when no backend is configured.
        document_id: Document to fetch.

    Returns:
        Snapshots in backend order.

    Raises:
        NoHistoryAvailable: If there is no backend or the history listing fails.
    """
    if backend is None:
        raise NoHistoryAvailable("No sync backend configured")

    items = await backend.get_history(document_id)

    async def _load(item: HistoryItem) -> Snapshot:
        content: str | None
        try:
            content = await backend.get_content(item.uid)
        except Exception as e:
            logger.warning(f"Content fetch failed for {document_id}@{item.uid}: {e}")
            content = None
        return Snapshot(
            timestamp=item.modified_time_millis,
            author=item.author,
            content=content,
            uid=item.uid,
            size=item.size,
        )

    snapshots = await asyncio.gather(*(_load(item) for item in items))
    logger.info(f"Fetched {len(snapshots)} snapshots for {document_id}")
    return list(snapshots)
