"""Abstract store interface.

Template overrides are a flat key/value mapping. Every backend (Gist,
SQLite, or nothing at all) implements this interface; the CLI and
prcopy_core only ever see a BaseStore.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable


class BaseStore(ABC):
    """Pluggable persistence for prompt template overrides.

    Backends log and swallow their own I/O failures: ``get`` degrades to an
    empty mapping and ``set`` to a no-op, so callers fall back to defaults.
    """

    @abstractmethod
    def get(self, keys: Iterable[str]) -> dict:
        """Return the stored values for *keys*; absent keys are omitted."""

    @abstractmethod
    def set(self, values: dict) -> None:
        """Persist every key/value pair in *values*, overwriting existing keys."""

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Default is a no-op so callers can always call close() safely.
        """
