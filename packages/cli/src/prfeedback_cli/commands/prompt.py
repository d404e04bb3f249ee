"""prompt command — write a Markdown prompt built from unaddressed PR feedback."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from prfeedback_core.config import default_output_path
from prfeedback_core.feedback import collect_feedback, write_prompt

console = Console()


@click.command("prompt")
@click.argument("pr_number", type=click.IntRange(min=1))
@click.option("--repo", default=None, help="GitHub repository in owner/name format. Detected from git if omitted.")
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file. Defaults to pr-<PR_NUMBER>.md in the configured output_dir.",
)
@click.option("--include-diff", is_flag=True, help="Append the PR's changed-file patches to the prompt.")
@click.pass_context
def prompt_cmd(ctx, pr_number: int, repo: str | None, output_path: Path | None, include_diff: bool):
    """Generate a prompt from the feedback on PR_NUMBER.

    Collects review summaries, conversation comments and inline threads,
    drops anything already answered, resolved, outdated, or posted by bots,
    and writes the rest, oldest first, to a Markdown file.

    \b
    Authentication:
      GITHUB_TOKEN         GitHub personal access token (or use gh CLI)
    """
    from prfeedback_cli.auth import require_github_token
    from prfeedback_cli.repo import resolve_repo

    config = dict(ctx.obj["config"])
    if include_diff:
        config["include_diff"] = True

    require_github_token(config)
    repo = resolve_repo(repo)

    console.print(f"Fetching feedback for [bold]{escape(repo)}#{pr_number}[/bold]...")
    try:
        snapshot, report = collect_feedback(repo, pr_number, config)
    except ValueError as e:
        raise click.ClickException(str(e))

    console.print(f'  PR: "{escape(report.pull_request.title)}"')
    console.print(
        f"  {len(snapshot.reviews)} review(s), {len(snapshot.conversation)} PR comment(s), "
        f"{len(snapshot.inline_threads)} inline thread(s)"
    )
    if report.author_last_activity is not None:
        console.print(f"  [dim]Author last responded {report.author_last_activity.isoformat()}[/dim]")

    target = output_path or default_output_path(pr_number, config)
    prompt = write_prompt(report, target, snapshot)

    if not report.comments:
        console.print("[yellow]No unaddressed feedback found.[/yellow]")
    console.print(f"[green]Written: {escape(str(target))} ({len(report.comments)} comment(s), {len(prompt)} chars)[/green]")
