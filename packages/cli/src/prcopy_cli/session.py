"""Helpers shared by the copy commands: page loading and the copy cycle."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlsplit

import click
import httpx
from bs4 import BeautifulSoup
from rich.console import Console

from prcopy_cli.clipboard import write_to_clipboard
from prcopy_core.feedback import CopyControl, CopyFeedbackController, CopyState
from prcopy_core.gh.fetch import PageFetcher
from prcopy_core.gh.markup import parse_document
from prcopy_core.services import CoreServices

console = Console()

_STATE_STYLE = {
    CopyState.PENDING: "dim",
    CopyState.SUCCESS: "green",
    CopyState.ERROR: "red",
    CopyState.IDLE: "bold",
}


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def page_origin(source: str) -> str | None:
    """scheme://host of a URL source, or None for a saved file."""
    if not is_url(source):
        return None
    parts = urlsplit(source)
    return f"{parts.scheme}://{parts.netloc}"


async def load_page(source: str, fetcher: PageFetcher) -> BeautifulSoup:
    """Parse a PR page from a saved HTML file or a URL."""
    if is_url(source):
        try:
            html = await fetcher.fetch(source)
        except httpx.HTTPError as e:
            raise click.ClickException(f"Could not fetch {source}: {e}")
    else:
        path = Path(source)
        if not path.exists():
            raise click.UsageError(f"No such file: {source}")
        html = path.read_text(encoding="utf-8", errors="replace")
    return parse_document(html)


async def copy_with_feedback(text: str, label: str, services: CoreServices) -> CopyState:
    """Run one copy cycle and echo every label change. Returns the terminal state."""
    outcome: list[CopyState] = []

    def on_change(control: CopyControl) -> None:
        state = controller.state
        if state in (CopyState.SUCCESS, CopyState.ERROR):
            outcome.append(state)
        style = _STATE_STYLE.get(state, "white")
        console.print(f"[{style}]\\[{control.label}][/{style}]")

    controller = CopyFeedbackController(
        CopyControl(label=label, on_change=on_change),
        success_delay=services.config.get("success_delay", 1.5),
        error_delay=services.config.get("error_delay", 2.0),
        diagnostics=services.diagnostics,
    )
    controller.trigger(lambda: write_to_clipboard(text))
    await controller.wait()
    return outcome[-1] if outcome else CopyState.IDLE
