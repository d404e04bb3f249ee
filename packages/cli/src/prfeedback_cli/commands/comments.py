"""comments command — show unaddressed PR feedback in the terminal."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from prfeedback_core.feedback import collect_feedback
from prfeedback_core.models import CommentKind

console = Console()

_KIND_STYLE = {
    CommentKind.INLINE: "cyan",
    CommentKind.REVIEW_SUMMARY: "magenta",
    CommentKind.CONVERSATION: "yellow",
}


def _first_line(text: str, width: int = 60) -> str:
    line = text.strip().splitlines()[0] if text.strip() else ""
    return line if len(line) <= width else line[: width - 1] + "…"


@click.command("comments")
@click.argument("pr_number", type=click.IntRange(min=1))
@click.option("--repo", default=None, help="GitHub repository in owner/name format. Detected from git if omitted.")
@click.pass_context
def comments_cmd(ctx, pr_number: int, repo: str | None):
    """List the feedback on PR_NUMBER that still needs a response."""
    from prfeedback_cli.auth import require_github_token
    from prfeedback_cli.repo import resolve_repo

    config = dict(ctx.obj["config"])
    config["include_diff"] = False

    require_github_token(config)
    repo = resolve_repo(repo)

    try:
        _, report = collect_feedback(repo, pr_number, config)
    except ValueError as e:
        raise click.ClickException(str(e))

    if not report.comments:
        console.print("[yellow]No unaddressed feedback found.[/yellow]")
        return

    table = Table(title=escape(f"Feedback — {repo}#{pr_number}"), show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Author")
    table.add_column("Location", no_wrap=True)
    table.add_column("When")
    table.add_column("Comment", max_width=60)

    for number, c in enumerate(report.comments, 1):
        style = _KIND_STYLE.get(c.kind, "white")
        table.add_row(
            str(number),
            f"[{style}]{c.kind.value}[/{style}]",
            escape(f"@{c.author}"),
            escape(c.location or c.state or ""),
            c.created_at.strftime("%Y-%m-%d %H:%M") if c.created_at else "",
            escape(_first_line(c.body)),
        )

    console.print(table)
