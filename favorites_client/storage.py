"""JSON file used as the degraded-mode copy of the favorites list."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

FAVORITES_KEY = "favorites"


class LocalFavoritesStore:
    """Tiny key-value store persisted as a single JSON object on disk.

    Only the ``favorites`` key is used.  A missing, unreadable or malformed
    file reads as "no copy available" so degraded mode never crashes the
    client.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable fallback store %s: %s", self.path, exc)
            return {}
        if not isinstance(document, dict):
            logger.warning("Ignoring fallback store %s with unexpected layout", self.path)
            return {}
        return document

    def load_favorites(self) -> list[dict[str, Any]] | None:
        """Return the stored list, or ``None`` when no usable copy exists."""

        favorites = self._read_all().get(FAVORITES_KEY)
        if not isinstance(favorites, list):
            return None
        return [movie for movie in favorites if isinstance(movie, dict)]

    def save_favorites(self, favorites: list[dict[str, Any]]) -> None:
        document = self._read_all()
        document[FAVORITES_KEY] = favorites
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(document, indent=2), encoding="utf-8")
