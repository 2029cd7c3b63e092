"""Author label to highlight color resolution.

Known authors get a color from a static override table fixed at startup.
Every other label falls back to a deterministic hash folded to 24 bits.

Resolved colors are memoized in one process-scoped AuthorColorRegistry:
``init_color_registry`` at startup, ``get_color_registry`` to read it,
``close_color_registry`` at shutdown. The registry is lock-guarded, so
rebuilds running in worker threads may share it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from types import MappingProxyType

logger = logging.getLogger(__name__)


def hash_color(label: str) -> str:
    """Derive a stable ``#rrggbb`` color from a label.

    Computes ``h = unit + (h << 5) - h`` over the label's UTF-16 code units
    in 32-bit arithmetic and keeps the low 24 bits. Characters outside the
    BMP contribute both halves of their surrogate pair, so colors match
    editors that hash JavaScript strings.
    """
    encoded = label.encode("utf-16-le", "surrogatepass")
    h = 0
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = (unit + (h << 5) - h) & 0xFFFFFFFF
    return f"#{h & 0xFFFFFF:06x}"


class AuthorColorRegistry:
    """Memoizing label-to-color resolver over a frozen override table."""

    def __init__(self, overrides: Mapping[str, str] | None = None):
        self.overrides: Mapping[str, str] = MappingProxyType(dict(overrides or {}))
        self._resolved: dict[str, str] = {}
        self._lock = threading.Lock()

    def color_for(self, label: str) -> str:
        """Return the color for a label, resolving and caching it on first use."""
        with self._lock:
            color = self._resolved.get(label)
            if color is None:
                color = self.overrides.get(label) or hash_color(label)
                self._resolved[label] = color
            return color

    def resolved(self) -> dict[str, str]:
        """Snapshot of every label resolved so far."""
        with self._lock:
            return dict(self._resolved)

    def clear(self) -> None:
        with self._lock:
            self._resolved.clear()


_registry: AuthorColorRegistry | None = None
_registry_lock = threading.Lock()


def init_color_registry(
    overrides: Mapping[str, str] | None = None,
) -> AuthorColorRegistry:
    """Create the process-scoped registry, replacing any previous one."""
    global _registry
    with _registry_lock:
        _registry = AuthorColorRegistry(overrides)
        logger.info(
            f"Color registry initialized with {len(_registry.overrides)} overrides"
        )
        return _registry


def get_color_registry() -> AuthorColorRegistry:
    """Return the process-scoped registry.

    If the app lifecycle has not created one (CLI runs, tests), it is built
    from the configured overrides on first access.
    """
    global _registry
    with _registry_lock:
        if _registry is None:
            from app.config import settings

            _registry = AuthorColorRegistry(settings.author_colors)
        return _registry


def close_color_registry() -> None:
    """Clear and drop the process-scoped registry."""
    global _registry
    with _registry_lock:
        if _registry is not None:
            _registry.clear()
        _registry = None
