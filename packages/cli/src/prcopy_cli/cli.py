"""CLI entry point for prcopy.

Commands:
  review     — copy a full PR review (hidden threads included) for an AI assistant
  thread     — copy a single inline review thread
  templates  — show, edit or reset the prompt templates
  init       — choose a template store and seed the default templates
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from prcopy_cli.commands.init import init_cmd
from prcopy_cli.commands.review import review_cmd
from prcopy_cli.commands.templates import templates_cmd
from prcopy_cli.commands.thread import thread_cmd

console = Console()


def _build_store(config: dict):
    """Instantiate the configured template store from .prcopy.yml settings.

    Store selection hierarchy:
      store: gist   → GistStore  (requires gist_id and GITHUB_TOKEN)
      store: sqlite → SQLiteStore (requires store_path or uses .prcopy.db)
      (default)     → NoOpStore  (built-in templates only)
    """
    from prcopy_store.noop import NoOpStore

    store_type = config.get("store", "noop")

    if store_type == "gist":
        from prcopy_store.gist import GistStore

        gist_id = config.get("gist_id")
        token = config.get("github_token")
        if not gist_id or not token:
            console.print("[yellow]GistStore requires gist_id and GITHUB_TOKEN. Falling back to no store.[/yellow]")
            return NoOpStore()
        return GistStore(gist_id=gist_id, token=token)

    if store_type == "sqlite":
        from prcopy_store.sqlite import SQLiteStore

        return SQLiteStore(db_path=config.get("store_path", ".prcopy.db"))

    return NoOpStore()


@click.group()
@click.version_option(
    version=importlib.metadata.version("prcopy"),
    prog_name="prcopy",
)
@click.option(
    "--config",
    "config_path",
    default=".prcopy.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRCOPY_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Show diagnostic log output.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Copy GitHub PR review comments as prompts for an AI assistant."""
    from prcopy_core.config import load_config
    from prcopy_core.services import CoreServices

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )

    ctx.ensure_object(dict)

    config = load_config(config_path)
    store = _build_store(config)
    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path
    ctx.obj["store"] = store
    ctx.obj["services"] = CoreServices.from_store(store, config=config)
    ctx.call_on_close(store.close)


main.add_command(review_cmd)
main.add_command(thread_cmd)
main.add_command(templates_cmd)
main.add_command(init_cmd)
