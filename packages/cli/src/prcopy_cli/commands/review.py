"""review command — copy a full PR review, hidden threads included."""

from __future__ import annotations

import asyncio

import click
from rich.console import Console

from prcopy_cli.session import copy_with_feedback, load_page, page_origin
from prcopy_core.aggregate import AggregationResolver
from prcopy_core.feedback import CopyState
from prcopy_core.gh.fetch import PageFetcher
from prcopy_core.gh.markup import find_review_containers, review_group_for, review_id_for

console = Console()

COPY_REVIEW_LABEL = "Copy review"


def _choose_container(containers: list, review_id: str | None):
    labelled = [(review_id_for(review_group_for(c)), c) for c in containers]
    if review_id is not None:
        for rid, container in labelled:
            if rid == review_id:
                return container
        raise click.UsageError(f"Review {review_id} not found on this page.")

    if len(labelled) == 1:
        return labelled[0][1]

    console.print("\nReviews on this page:")
    for idx, (rid, container) in enumerate(labelled, 1):
        preview = " ".join(container.get_text().split())[:60]
        console.print(f"  [bold]{idx}[/bold]  {rid or '(no id)'}  [dim]{preview}[/dim]")
    choice = click.prompt("\nEnter the review number", type=click.IntRange(1, len(labelled)))
    return labelled[choice - 1][1]


async def _copy_review(services, source: str, review_id: str | None, print_only: bool) -> CopyState:
    fetcher = PageFetcher(timeout=services.config.get("timeout", 20.0))
    document = await load_page(source, fetcher)

    containers = find_review_containers(document)
    if not containers:
        raise click.ClickException("No review comments found on this page.")
    container = _choose_container(containers, review_id)

    resolver = AggregationResolver(services)
    aggregate = await resolver.resolve_review(container, fetcher.fetch, base_url=page_origin(source))
    prompt = resolver.render_review(aggregate)

    console.print(
        f"[cyan]Review {aggregate.review_id or 'unknown'}: {len(aggregate.fragments)} block(s) "
        f"({aggregate.overview_blocks} visible, {aggregate.hidden_found}/{aggregate.hidden_ids} hidden)[/cyan]"
    )
    if print_only:
        console.print(prompt, markup=False, highlight=False, soft_wrap=True)
        return CopyState.SUCCESS
    return await copy_with_feedback(prompt, COPY_REVIEW_LABEL, services)


@click.command("review")
@click.argument("source")
@click.option("--review-id", default=None, help="Numeric review id (pullrequestreview-<id>). Prompts when omitted.")
@click.option(
    "--print",
    "print_only",
    is_flag=True,
    help="Print the prompt instead of copying it to the clipboard.",
)
@click.pass_context
def review_cmd(ctx, source: str, review_id: str | None, print_only: bool):
    """Copy a full PR review as an AI prompt.

    SOURCE is a pull request URL or a saved HTML page. Review threads GitHub
    hides behind "Load more" are fetched from the page's hidden-comments
    endpoint and appended after the visible ones.
    """
    services = ctx.obj["services"]
    state = asyncio.run(_copy_review(services, source, review_id, print_only))
    if state is CopyState.ERROR:
        raise click.ClickException("Could not write to the clipboard. Re-run with --print.")
