"""init command — choose a template store and seed the default templates.

Writes .prcopy.yml, optionally creates a private Gist for shared templates,
and stores the built-in templates for any key the store does not have yet.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
import tempfile
from pathlib import Path

import click
import yaml
from rich.console import Console

console = Console()
logger = logging.getLogger(__name__)


@click.command("init")
@click.pass_context
def init_cmd(ctx):
    """Set up prcopy: pick where templates live and seed the defaults."""
    from prcopy_core.config import ensure_defaults
    from prcopy_cli.cli import _build_store

    console.print("\n[bold cyan]prcopy init[/bold cyan] — template store setup\n")

    console.print("Template store:")
    console.print("  [bold]none[/bold]    — built-in templates only (default)")
    console.print("  [bold]sqlite[/bold]  — local SQLite file")
    console.print("  [bold]gist[/bold]    — private GitHub Gist, shared across machines")
    store_type = click.prompt(
        "Store backend",
        type=click.Choice(["none", "sqlite", "gist"]),
        default="none",
    )

    config: dict = {}
    if store_type == "sqlite":
        db_path = click.prompt("SQLite database path", default=".prcopy.db")
        config["store"] = "sqlite"
        if db_path != ".prcopy.db":
            config["store_path"] = db_path
        console.print(f"[green]SQLite store configured at {db_path}[/green]")

    elif store_type == "gist":
        console.print("\n[yellow]Note:[/yellow] Gist store reads GITHUB_TOKEN, which needs [bold]gist[/bold] scope.")
        gist_id = _create_template_gist()
        if gist_id:
            console.print(f"[green]Created Gist: {gist_id}[/green]")
            config["store"] = "gist"
            config["gist_id"] = gist_id
        else:
            console.print("[yellow]Gist creation failed — add gist_id manually to .prcopy.yml[/yellow]")

    config_path = ctx.obj.get("config_path", ".prcopy.yml") if ctx.obj else ".prcopy.yml"
    _write_config(config, config_path)
    console.print(f"[green]Wrote {config_path}[/green]")

    if config.get("store"):
        full_config = {**(ctx.obj.get("config") or {}), **config} if ctx.obj else config
        store = _build_store(full_config)
        try:
            written = ensure_defaults(store)
        finally:
            store.close()
        if written:
            console.print(f"[green]Seeded default templates: {', '.join(written)}[/green]")
        else:
            console.print("[dim]Templates already present; left unchanged.[/dim]")

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Copy a review with: [bold]prcopy review <pull request URL>[/bold]")


def _create_template_gist() -> str | None:
    """Create a private Gist holding an empty template file and return its ID."""
    from prcopy_store.gist import GIST_FILENAME

    tmp_dir = tempfile.mkdtemp()
    named_path = os.path.join(tmp_dir, GIST_FILENAME)
    try:
        with open(named_path, "w", encoding="utf-8") as f:
            json.dump({}, f)
        result = subprocess.run(
            ["gh", "gist", "create", "--desc", "prcopy prompt templates", named_path],
            capture_output=True,
            text=True,
            timeout=15,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    finally:
        if os.path.exists(named_path):
            os.unlink(named_path)
        os.rmdir(tmp_dir)

    if result.returncode == 0:
        gist_url = result.stdout.strip()
        return gist_url.rstrip("/").split("/")[-1]
    logger.warning("gh gist create failed: %s", result.stderr.strip())
    return None


def _write_config(config: dict, config_path: str = ".prcopy.yml") -> None:
    """Write or update the config file, preserving any existing keys."""
    path = Path(config_path)
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))
