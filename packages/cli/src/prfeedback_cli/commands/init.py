"""init command — interactive setup of .prfeedback.yml."""

from __future__ import annotations

from pathlib import Path

import click
import yaml
from rich.console import Console

console = Console()


@click.command("init")
@click.pass_context
def init_cmd(ctx):
    """Create or update .prfeedback.yml.

    Existing keys in the file are preserved; only the answered settings change.
    """
    config_path = Path(ctx.obj.get("config_path", ".prfeedback.yml") if ctx.obj else ".prfeedback.yml")
    current = ctx.obj.get("config", {}) if ctx.obj else {}

    console.print("\n[bold cyan]prfeedback init[/bold cyan]\n")

    output_dir = click.prompt("Directory for generated prompts", default=current.get("output_dir", "."))
    patterns = click.prompt(
        "Extra bot login patterns (comma-separated, blank for none)",
        default=",".join(current.get("bot_patterns") or []),
        show_default=False,
    )
    include_diff = click.confirm(
        "Include changed-file patches in prompts by default?",
        default=bool(current.get("include_diff", False)),
    )

    config = {
        "output_dir": output_dir,
        "bot_patterns": [p.strip() for p in patterns.split(",") if p.strip()],
        "include_diff": include_diff,
    }
    _write_config(config_path, config)
    console.print(f"[green]Wrote {config_path}[/green]")
    console.print("Generate a prompt with: [bold]prfeedback prompt <number>[/bold]")


def _write_config(path: Path, config: dict) -> None:
    """Write or update the config file, preserving any existing keys."""
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))
