"""thread command — copy one inline review thread."""

from __future__ import annotations

import asyncio

import click
from rich.console import Console

from prcopy_cli.session import copy_with_feedback, load_page
from prcopy_core.aggregate import AggregationResolver
from prcopy_core.feedback import CopyState
from prcopy_core.fragments import extract
from prcopy_core.gh.fetch import PageFetcher
from prcopy_core.gh.markup import DISCUSSION_ID_PREFIX, THREAD_SELECTOR, closest, find_discussion, find_inline_threads

console = Console()

COPY_THREAD_LABEL = "Copy for AI"


def _choose_thread(document):
    threads = find_inline_threads(document)
    if not threads:
        raise click.ClickException("No inline review comments found on this page.")
    if len(threads) == 1:
        return threads[0]

    console.print("\nInline comments on this page:")
    for idx, thread in enumerate(threads, 1):
        fragment = extract(thread)
        comment_id = (thread.get("id") or "").removeprefix(DISCUSSION_ID_PREFIX) or "?"
        location = f"{fragment.file_path or '?'}:{fragment.line_start or '?'}"
        preview = " ".join(fragment.text.split())[:50]
        console.print(f"  [bold]{idx}[/bold]  {comment_id}  [cyan]{location}[/cyan]  [dim]{preview}[/dim]")
    choice = click.prompt("\nEnter the comment number", type=click.IntRange(1, len(threads)))
    return threads[choice - 1]


async def _copy_thread(services, source: str, comment_id: str | None, print_only: bool) -> CopyState:
    fetcher = PageFetcher(timeout=services.config.get("timeout", 20.0))
    document = await load_page(source, fetcher)

    if comment_id is None:
        thread = _choose_thread(document)
    else:
        node = find_discussion(document, comment_id)
        if node is None:
            raise click.UsageError(f"Comment {comment_id} not found on this page.")
        thread = closest(node, THREAD_SELECTOR) or node.select_one(THREAD_SELECTOR) or node

    prompt = AggregationResolver(services).render_thread(thread)
    if print_only:
        console.print(prompt, markup=False, highlight=False, soft_wrap=True)
        return CopyState.SUCCESS
    return await copy_with_feedback(prompt, COPY_THREAD_LABEL, services)


@click.command("thread")
@click.argument("source")
@click.option(
    "--comment-id",
    default=None,
    help="Review comment id (the number in #discussion_r<id>). Prompts when omitted.",
)
@click.option(
    "--print",
    "print_only",
    is_flag=True,
    help="Print the prompt instead of copying it to the clipboard.",
)
@click.pass_context
def thread_cmd(ctx, source: str, comment_id: str | None, print_only: bool):
    """Copy a single inline review comment with its file, lines and code."""
    services = ctx.obj["services"]
    state = asyncio.run(_copy_thread(services, source, comment_id, print_only))
    if state is CopyState.ERROR:
        raise click.ClickException("Could not write to the clipboard. Re-run with --print.")
