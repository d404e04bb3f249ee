"""Token lookup for the prfeedback commands that read from GitHub.

`prfeedback prompt` and `prfeedback comments` only read the pull request, its
reviews, conversation and review threads, so any token with read access to the
repository works. The first of these that yields a token wins:
  1. GITHUB_TOKEN environment variable
  2. `gh auth token` (the GitHub CLI session from `gh auth login`)
"""

from __future__ import annotations

import logging
import os
import subprocess

import click

logger = logging.getLogger(__name__)


def resolve_github_token() -> str | None:
    """Return a GitHub token or None if no source provides one.

    Never raises; commands that need a token turn None into a UsageError.
    """
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        logger.debug("gh CLI unavailable; no token from a gh session.")
        return None

    if result.returncode != 0:
        return None
    gh_token = result.stdout.strip()
    if not gh_token:
        return None
    logger.debug("Resolved GitHub token via gh CLI session.")
    return gh_token


def require_github_token(config: dict) -> str:
    token = config.get("github_token")
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )
    return token
