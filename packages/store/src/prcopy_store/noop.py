"""No-op store — the default when no store is configured.

Nothing is persisted, so every lookup falls back to the built-in templates.
"""

from __future__ import annotations

from typing import Iterable

from prcopy_store.base import BaseStore


class NoOpStore(BaseStore):
    """Silently discards all writes — zero configuration required."""

    def get(self, keys: Iterable[str]) -> dict:
        return {}

    def set(self, values: dict) -> None:
        pass  # intentional no-op
