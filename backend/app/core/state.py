"""Process-scoped services shared by the API routes."""

import logging

from app.config import settings
from pipeline.attribution.colors import (
    close_color_registry,
    get_color_registry,
    init_color_registry,
)
from pipeline.rebuild import RebuildCoordinator
from pipeline.sync.client import SyncHistoryClient

logger = logging.getLogger(__name__)

_coordinator: RebuildCoordinator | None = None


def build_coordinator() -> RebuildCoordinator:
    """Create a RebuildCoordinator from settings."""
    backend = None
    if settings.sync_base_url:
        backend = SyncHistoryClient(
            settings.sync_base_url, timeout=settings.sync_timeout_seconds
        )
    else:
        logger.warning("SYNC_BASE_URL not set; attribution will be empty")

    return RebuildCoordinator(
        backend,
        registry=get_color_registry(),
        opacity=settings.highlight_opacity,
        offset_units=settings.offset_units,
    )


async def startup() -> None:
    global _coordinator
    init_color_registry(settings.author_colors)
    _coordinator = build_coordinator()


async def shutdown() -> None:
    global _coordinator
    if _coordinator is not None:
        await _coordinator.close()
        _coordinator = None
    close_color_registry()


def get_rebuild_coordinator() -> RebuildCoordinator:
    """FastAPI dependency returning the shared coordinator."""
    global _coordinator
    if _coordinator is None:
        _coordinator = build_coordinator()
    return _coordinator
