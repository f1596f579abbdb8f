"""templates command — show, edit or reset the prompt templates."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from prcopy_core.config import load_templates, reset_templates, save_templates
from prcopy_core.templates import INLINE_PLACEHOLDERS, REVIEW_PLACEHOLDERS, Template

console = Console()

_RECOGNIZED = {"inline": INLINE_PLACEHOLDERS, "review": REVIEW_PLACEHOLDERS}


def _require_store(ctx):
    from prcopy_store.noop import NoOpStore

    store = ctx.obj.get("store") if ctx.obj else None
    if store is None or isinstance(store, NoOpStore):
        raise click.UsageError(
            "No store configured. Add 'store: sqlite' or 'store: gist' to .prcopy.yml, "
            "or run `prcopy init` to set one up."
        )
    return store


@click.group("templates")
def templates_cmd():
    """Manage the prompt templates used when copying."""


@templates_cmd.command("show")
@click.pass_context
def show_cmd(ctx):
    """Print the active templates."""
    store = ctx.obj["store"]
    templates = load_templates(store, ctx.obj["services"].diagnostics)
    for name, pattern in (("inline", templates.inline), ("review", templates.review)):
        placeholders = ", ".join(sorted(_RECOGNIZED[name]))
        console.print(Panel(Text(pattern), title=f"[bold]{name}[/bold]", subtitle=f"[dim]{placeholders}[/dim]"))


@templates_cmd.command("set")
@click.argument("name", type=click.Choice(["inline", "review"]))
@click.option("--file", "file_path", type=click.Path(exists=True, dir_okay=False), default=None)
@click.option("--text", default=None, help="Template text. Blank resets this template to the default.")
@click.pass_context
def set_cmd(ctx, name: str, file_path: str | None, text: str | None):
    """Replace the NAME template with the contents of --file or --text."""
    store = _require_store(ctx)
    if (file_path is None) == (text is None):
        raise click.UsageError("Pass exactly one of --file or --text.")
    pattern = Path(file_path).read_text(encoding="utf-8") if file_path else text

    unknown = Template.parse(pattern).unknown_placeholders(_RECOGNIZED[name])
    if unknown:
        tokens = ", ".join("{{" + u + "}}" for u in sorted(unknown))
        console.print(f"[yellow]Unrecognized placeholders will be copied verbatim: {escape(tokens)}[/yellow]")

    save_templates(store, **{name: pattern})
    ctx.obj["services"].reload_templates()
    console.print(f"[green]Saved {name} template.[/green]")


@templates_cmd.command("reset")
@click.pass_context
def reset_cmd(ctx):
    """Restore both templates to the built-in defaults."""
    store = _require_store(ctx)
    reset_templates(store)
    ctx.obj["services"].reload_templates()
    console.print("[green]Reset to defaults.[/green]")
