"""GitHub pull-request page markup: selectors and tree helpers.

Everything that knows the shape of GitHub's HTML lives here so the extractor
and resolver stay readable. Trees are BeautifulSoup documents; matching goes
through soupsieve via ``Tag.css``.
"""

from __future__ import annotations

import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

THREAD_SELECTOR = ".timeline-comment-group.review-comment.js-minimizable-comment-group"
COMMENT_BODY_SELECTOR = ".comment-body.markdown-body.js-comment-body"
REVIEW_BODY_SELECTOR = COMMENT_BODY_SELECTOR + ".soft-wrap.user-select-contain"

# Ancestors that carry file/line metadata, in priority order.
METADATA_SCOPE_SELECTORS = (
    "details.review-thread-component",
    ".js-comment-container",
    ".TimelineItem-body",
)
FILE_LINK_SELECTOR = "a.text-mono.text-small.Link--primary"
LINE_START_SELECTOR = ".js-multi-line-preview-start"
LINE_END_SELECTOR = ".js-multi-line-preview-end"

INLINE_CONTAINER_SELECTOR = ".js-inline-comments-container"
DIFF_TABLE_SELECTOR = "table.js-diff-table"
CODE_LINE_SELECTOR = ".blob-code-inner"

# Stripped from a comment body before its text is read.
INTERACTIVE_SELECTOR = "button, clipboard-copy, details-menu, form, input, select, textarea, svg"

REVIEW_GROUP_SELECTOR = ".timeline-comment-group"
REVIEW_CONTAINER_SELECTOR = ".js-comment-container, .js-comment"
HIDDEN_IDS_FORM_SELECTOR = ".js-review-hidden-comment-ids"
HIDDEN_IDS_ATTR = "data-hidden-comment-ids"

DISCUSSION_ID_PREFIX = "discussion_r"

_REVIEW_ID_RE = re.compile(r"pullrequestreview-(\d+)")


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def closest(node: Tag, selector: str) -> Tag | None:
    """Nearest ancestor of *node* (inclusive) matching *selector*."""
    return node.css.closest(selector)


def tree_root(node: Tag) -> Tag:
    root = node
    while root.parent is not None:
        root = root.parent
    return root


def contains(root: Tag, node: Tag) -> bool:
    """True when *node* is *root* or one of its descendants (identity, not equality)."""
    if node is root:
        return True
    return any(parent is root for parent in node.parents)


def discussion_dom_id(comment_id: str) -> str:
    return f"{DISCUSSION_ID_PREFIX}{comment_id}"


def find_discussion(document: Tag, comment_id: str) -> Tag | None:
    return document.find(id=discussion_dom_id(comment_id))


def review_group_for(container: Tag) -> Tag:
    return closest(container, REVIEW_GROUP_SELECTOR) or container


def review_id_for(group: Tag) -> str | None:
    match = _REVIEW_ID_RE.search(group.get("id") or "")
    return match.group(1) if match else None


def hidden_comment_source(document: Tag, review_id: str) -> tuple[list[str], str | None]:
    """Return (hidden comment ids, form action) for *review_id*.

    GitHub renders one ``.js-review-hidden-comment-ids`` form per review with
    a paginated thread list; its action URL serves the missing threads.
    """
    for form in document.select(HIDDEN_IDS_FORM_SELECTOR):
        action = form.get("action") or ""
        if f"/reviews/{review_id}/" not in action:
            continue
        raw = form.get(HIDDEN_IDS_ATTR) or ""
        ids = [part.strip() for part in raw.split(",") if part.strip()]
        return ids, action
    return [], None


def absolute_url(base_url: str, action: str) -> str:
    return urljoin(base_url.rstrip("/") + "/", action)


def find_inline_threads(document: Tag) -> list[Tag]:
    return document.select(THREAD_SELECTOR)


def find_review_containers(document: Tag) -> list[Tag]:
    """Top-level review containers, one per review body, in document order."""
    containers: list[Tag] = []
    for body in document.select(REVIEW_BODY_SELECTOR):
        if closest(body, INLINE_CONTAINER_SELECTOR) is not None:
            continue
        container = closest(body, REVIEW_CONTAINER_SELECTOR)
        if container is None or any(container is seen for seen in containers):
            continue
        containers.append(container)
    return containers
