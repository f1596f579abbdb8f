"""Review aggregation: visible comments, locally findable threads, and threads
GitHub only serves through its hidden-comments endpoint, merged into one
ordered list of rendered texts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable

from bs4 import Tag

from prcopy_core.fragments import NO_COMMENT_TEXT, CommentFragment, Origin, extract
from prcopy_core.gh import markup
from prcopy_core.services import CoreServices
from prcopy_core.templates import render

FetchHiddenFragment = Callable[[str], Awaitable[str]]
ContainsPredicate = Callable[[Tag, Tag], bool]

REVIEW_SEPARATOR = "\n\n---\n\n"
NO_REVIEW_TEXT = "(no review text found)"


@dataclass
class ReviewAggregate:
    review_id: str | None
    fragments: list[str] = field(default_factory=list)
    overview_blocks: int = 0
    hidden_ids: int = 0
    hidden_found: int = 0

    def review_text(self) -> str:
        return REVIEW_SEPARATOR.join(self.fragments) if self.fragments else NO_REVIEW_TEXT


class AggregationResolver:
    """Resolves one review's scope into a ReviewAggregate.

    Ordering is fixed: comments inside the scope root in document order,
    then comments for each external id in id order. A comment node is never
    rendered twice, however many ids or passes reach it.
    """

    def __init__(self, services: CoreServices, contains: ContainsPredicate = markup.contains):
        self._services = services
        self._contains = contains

    @property
    def diagnostics(self):
        return self._services.diagnostics

    def render_fragment(self, fragment: CommentFragment) -> str:
        if fragment.has_location:
            return render(self._services.templates.inline, fragment.inline_data())
        return fragment.text or NO_COMMENT_TEXT

    def render_review(self, aggregate: ReviewAggregate) -> str:
        return render(self._services.templates.review, {"reviewText": aggregate.review_text()})

    def render_thread(self, thread: Tag) -> str:
        fragment = extract(thread)
        self.diagnostics.log(
            "Copying inline comment",
            file_path=fragment.file_path,
            line_start=fragment.line_start,
            line_end=fragment.line_end,
            has_code=bool(fragment.code_excerpt),
        )
        return render(self._services.templates.inline, fragment.inline_data())

    def _collect(self, root: Tag, origin: Origin, seen: set[int], out: list[str]) -> int:
        added = 0
        for body in root.select(markup.COMMENT_BODY_SELECTOR):
            if id(body) in seen:
                continue
            seen.add(id(body))
            fragment = extract(body, origin)
            self.diagnostics.debug("Extracted comment", origin=origin.value, file_path=fragment.file_path)
            out.append(self.render_fragment(fragment))
            added += 1
        return added

    async def resolve(
        self,
        scope_root: Tag,
        external_ids: Iterable[str],
        fetch_hidden_fragment: FetchHiddenFragment,
        source_url: str | None = None,
        document: Tag | None = None,
        review_id: str | None = None,
    ) -> ReviewAggregate:
        """Aggregate *scope_root* plus the comments named by *external_ids*.

        Ids are looked up in *document* (default: the root of scope_root's
        tree) as ``discussion_r<id>``. Ids found nowhere are fetched in one
        request to *source_url*. A failed fetch is logged and the comments
        gathered so far are returned; nothing is raised.
        """
        ids = list(external_ids)
        document = document if document is not None else markup.tree_root(scope_root)
        if review_id is None:
            review_id = markup.review_id_for(markup.review_group_for(scope_root))

        seen: set[int] = set()
        fragments: list[str] = []
        aggregate = ReviewAggregate(review_id=review_id, fragments=fragments, hidden_ids=len(ids))

        aggregate.overview_blocks = self._collect(scope_root, Origin.VISIBLE, seen, fragments)

        missing: list[str] = []
        for comment_id in ids:
            node = markup.find_discussion(document, comment_id)
            if node is None:
                missing.append(comment_id)
            elif not self._contains(scope_root, node):
                aggregate.hidden_found += self._collect(node, Origin.VISIBLE, seen, fragments)

        if missing:
            aggregate.hidden_found += await self._resolve_missing(
                review_id, missing, fetch_hidden_fragment, source_url, seen, fragments
            )

        self.diagnostics.log(
            "Resolved review",
            review_id=review_id or "unknown",
            total_blocks=len(fragments),
            overview_blocks=aggregate.overview_blocks,
            hidden_ids=aggregate.hidden_ids,
            hidden_found=aggregate.hidden_found,
        )
        return aggregate

    async def _resolve_missing(
        self,
        review_id: str | None,
        missing: list[str],
        fetch_hidden_fragment: FetchHiddenFragment,
        source_url: str | None,
        seen: set[int],
        fragments: list[str],
    ) -> int:
        if not source_url:
            self.diagnostics.warn("No hidden comment source for review", review_id=review_id, missing=len(missing))
            return 0

        self.diagnostics.log("Fetching hidden review threads", review_id=review_id, missing=len(missing))
        fetched: list[str] = []
        fetched_seen = set(seen)
        unresolved = 0
        try:
            html = await fetch_hidden_fragment(source_url)
            tree = markup.parse_document(html)
            for comment_id in missing:
                node = markup.find_discussion(tree, comment_id)
                if node is None:
                    unresolved += 1
                    continue
                self._collect(node, Origin.FETCHED_REMOTE, fetched_seen, fetched)
        except Exception as e:
            self.diagnostics.warn("Error fetching hidden threads", review_id=review_id, error=repr(e))
            return 0

        seen.update(fetched_seen)
        fragments.extend(fetched)
        self.diagnostics.log(
            "Fetched hidden threads",
            review_id=review_id,
            newly_found=len(fetched),
            unresolved=unresolved,
        )
        return len(fetched)

    async def resolve_review(
        self,
        container: Tag,
        fetch_hidden_fragment: FetchHiddenFragment,
        base_url: str | None = None,
    ) -> ReviewAggregate:
        """Aggregate the review that *container* belongs to, hidden threads included.

        The hidden-comment form action is resolved against *base_url* (the
        origin the page was loaded from), or the configured ``base_url``.
        """
        group = markup.review_group_for(container)
        review_id = markup.review_id_for(group)
        document = markup.tree_root(container)

        ids: list[str] = []
        source_url = None
        if review_id:
            ids, action = markup.hidden_comment_source(document, review_id)
            if action:
                source_url = markup.absolute_url(base_url or self._services.config["base_url"], action)

        return await self.resolve(group, ids, fetch_hidden_fragment, source_url, document, review_id)
