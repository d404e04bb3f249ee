"""Feedback collection: fetch, normalize, render, write."""

from __future__ import annotations

import logging
from pathlib import Path

from prfeedback_core.gh.pull_request import fetch_snapshot, get_repo
from prfeedback_core.models import FeedbackReport, FeedbackSnapshot
from prfeedback_core.normalize import normalize_all
from prfeedback_core.render import render_prompt

logger = logging.getLogger(__name__)


def collect_feedback(
    repo: str,
    pr_number: int,
    config: dict,
    repo_obj=None,
) -> tuple[FeedbackSnapshot, FeedbackReport]:
    """Fetch a PR's feedback and reduce it to the comments that still need a response.

    Returns the raw snapshot alongside the report so callers can reuse the
    fetched changed files when rendering.
    """
    this_repo = repo_obj if repo_obj is not None else get_repo(repo, token=config["github_token"])

    snapshot = fetch_snapshot(
        this_repo,
        pr_number,
        include_diff=bool(config.get("include_diff", False)),
        max_patch_chars=config.get("max_patch_chars", 20000),
    )
    logger.debug(
        "Fetched %d review(s), %d PR comment(s), %d inline thread(s) for %s#%d",
        len(snapshot.reviews),
        len(snapshot.conversation),
        len(snapshot.inline_threads),
        repo,
        pr_number,
    )

    report = normalize_all(snapshot, bot_patterns=config.get("bot_patterns", []))
    return snapshot, report


def write_prompt(report: FeedbackReport, output_path: Path, snapshot: FeedbackSnapshot | None = None) -> str:
    """Render the report to output_path (UTF-8) and return the rendered text."""
    changed_files = snapshot.changed_files if snapshot is not None else None
    prompt = render_prompt(report.pull_request, report.comments, changed_files)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(prompt, encoding="utf-8")
    return prompt
