"""CLI entry point for prfeedback.

Commands:
  prompt    — write a Markdown prompt with the PR feedback still needing a response
  comments  — print that feedback as a table without writing a file
  init      — create or update .prfeedback.yml
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from prfeedback_cli.commands.comments import comments_cmd
from prfeedback_cli.commands.init import init_cmd
from prfeedback_cli.commands.prompt import prompt_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("prfeedback"),
    prog_name="prfeedback",
)
@click.option(
    "--config",
    "config_path",
    default=".prfeedback.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRFEEDBACK_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Turn GitHub PR review feedback into a prompt for your coding agent."""
    from prfeedback_core.config import load_config
    from prfeedback_cli.auth import resolve_github_token

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.ClickException(f"Invalid config {config_path}: {e}")

    # Resolve token early so all subcommands share the same resolution.
    token = resolve_github_token()
    if token:
        config["github_token"] = token

    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path


main.add_command(prompt_cmd)
main.add_command(comments_cmd)
main.add_command(init_cmd)
