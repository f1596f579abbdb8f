"""Extraction of one review comment (plus its file/line/code context) from a page tree."""

from __future__ import annotations

import copy
import enum
from dataclasses import dataclass

from bs4 import Tag

from prcopy_core.gh.markup import (
    CODE_LINE_SELECTOR,
    COMMENT_BODY_SELECTOR,
    DIFF_TABLE_SELECTOR,
    FILE_LINK_SELECTOR,
    INLINE_CONTAINER_SELECTOR,
    INTERACTIVE_SELECTOR,
    LINE_END_SELECTOR,
    LINE_START_SELECTOR,
    METADATA_SCOPE_SELECTORS,
    closest,
    tree_root,
)

UNKNOWN_FILE = "unknown file"
UNKNOWN_LINE = "?"
NO_COMMENT_TEXT = "(no comment text found)"
NO_CODE_TEXT = "// no code snippet found"


class Origin(str, enum.Enum):
    VISIBLE = "visible"
    FETCHED_REMOTE = "fetched_remote"


@dataclass(frozen=True)
class CommentFragment:
    """One unit of review text with its positional and code context."""

    text: str
    file_path: str | None = None
    line_start: str | None = None
    line_end: str | None = None
    code_excerpt: str = ""
    origin: Origin = Origin.VISIBLE

    @property
    def has_location(self) -> bool:
        return self.file_path is not None or self.line_start is not None

    def inline_data(self) -> dict[str, str]:
        """Placeholder values for the ``inline`` template, defaults filled in."""
        return {
            "filePath": self.file_path or UNKNOWN_FILE,
            "lineStart": self.line_start or UNKNOWN_LINE,
            "lineEnd": self.line_end or UNKNOWN_LINE,
            "commentText": self.text or NO_COMMENT_TEXT,
            "codeText": self.code_excerpt or NO_CODE_TEXT,
        }


def _metadata_scope(node: Tag) -> Tag:
    for selector in METADATA_SCOPE_SELECTORS:
        scope = closest(node, selector)
        if scope is not None:
            return scope
    return tree_root(node)


def _stripped_text(scope: Tag, selector: str) -> str | None:
    el = scope.select_one(selector)
    return el.get_text().strip() if el is not None else None


def _comment_body(node: Tag) -> Tag | None:
    if node.css.match(COMMENT_BODY_SELECTOR):
        return node
    return node.select_one(COMMENT_BODY_SELECTOR)


def _body_text(body: Tag | None) -> str:
    if body is None:
        return ""
    detached = copy.copy(body)
    for el in detached.select(INTERACTIVE_SELECTOR):
        el.decompose()
    return detached.get_text().strip()


def _previous_element(node: Tag) -> Tag | None:
    sibling = node.previous_sibling
    while sibling is not None and not isinstance(sibling, Tag):
        sibling = sibling.previous_sibling
    return sibling


def _diff_table(node: Tag, scope: Tag) -> Tag | None:
    container = closest(node, INLINE_CONTAINER_SELECTOR)
    if container is not None:
        adjacent = _previous_element(container)
        if adjacent is not None:
            table = adjacent if adjacent.css.match(DIFF_TABLE_SELECTOR) else adjacent.select_one(DIFF_TABLE_SELECTOR)
            if table is not None:
                return table
    return scope.select_one(DIFF_TABLE_SELECTOR)


def _code_excerpt(table: Tag | None) -> str:
    if table is None:
        return ""
    return "\n".join(span.get_text() for span in table.select(CODE_LINE_SELECTOR))


def extract(node: Tag, origin: Origin = Origin.VISIBLE) -> CommentFragment:
    """Build a CommentFragment from a thread group or a comment body.

    Never raises for a well-formed tree: every missing piece degrades to
    None (metadata) or "" (text, code). The live tree is not modified.
    """
    scope = _metadata_scope(node)
    line_start = _stripped_text(scope, LINE_START_SELECTOR)
    line_end = _stripped_text(scope, LINE_END_SELECTOR)
    if line_end is None:
        line_end = line_start

    return CommentFragment(
        text=_body_text(_comment_body(node)),
        file_path=_stripped_text(scope, FILE_LINK_SELECTOR),
        line_start=line_start,
        line_end=line_end,
        code_excerpt=_code_excerpt(_diff_table(node, scope)),
        origin=origin,
    )
