"""Explicitly constructed bundle of the collaborators every component needs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from prcopy_core.config import DEFAULT_CONFIG, DEFAULT_TEMPLATES, TemplateSet, load_templates
from prcopy_core.diagnostics import Diagnostics

if TYPE_CHECKING:
    from prcopy_store.base import BaseStore


@dataclass
class CoreServices:
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    templates: TemplateSet = DEFAULT_TEMPLATES
    config: dict = field(default_factory=lambda: dict(DEFAULT_CONFIG))
    store: Optional["BaseStore"] = None

    @classmethod
    def from_store(cls, store, config: dict | None = None, diagnostics: Diagnostics | None = None) -> CoreServices:
        diagnostics = diagnostics or Diagnostics()
        return cls(
            diagnostics=diagnostics,
            templates=load_templates(store, diagnostics),
            config={**DEFAULT_CONFIG, **(config or {})},
            store=store,
        )

    def reload_templates(self) -> TemplateSet:
        """Re-read templates after the store reports a change."""
        if self.store is not None:
            self.templates = load_templates(self.store, self.diagnostics)
        return self.templates
