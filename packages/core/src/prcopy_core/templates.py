"""Placeholder substitution for prompt templates.

A placeholder is the literal token ``{{name}}``. Substitution is a single
pass over the template: values are inserted verbatim and never re-scanned,
so a value that itself contains ``{{...}}`` stays literal.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping

_TOKEN_RE = re.compile(r"\{\{([^{}]+)\}\}")

INLINE_PLACEHOLDERS = frozenset({"filePath", "lineStart", "lineEnd", "commentText", "codeText"})
REVIEW_PLACEHOLDERS = frozenset({"reviewText"})


def render(template: str, data: Mapping[str, Any] | None) -> str:
    """Replace every ``{{key}}`` for each key in *data*.

    Known keys are replaced even when their value is empty or None (None
    renders as ""). Tokens naming a key absent from *data* pass through
    unchanged.
    """
    if not data:
        return template
    values = {key: "" if value is None else str(value) for key, value in data.items()}
    # Longest token first so overlapping keys match the same way in any order.
    keys = sorted(values, key=lambda k: (-len(k), k))
    pattern = re.compile("|".join(r"\{\{" + re.escape(key) + r"\}\}" for key in keys))
    return pattern.sub(lambda m: values[m.group(0)[2:-2]], template)


def placeholders_in(pattern: str) -> frozenset[str]:
    return frozenset(_TOKEN_RE.findall(pattern))


@dataclass(frozen=True)
class Template:
    pattern: str
    placeholders: frozenset[str] = field(default=frozenset())

    @classmethod
    def parse(cls, pattern: str) -> Template:
        return cls(pattern=pattern, placeholders=placeholders_in(pattern))

    def render(self, data: Mapping[str, Any] | None) -> str:
        return render(self.pattern, data)

    def unknown_placeholders(self, recognized: frozenset[str]) -> frozenset[str]:
        """Tokens in the pattern that rendering with *recognized* keys would leave verbatim."""
        return self.placeholders - recognized
