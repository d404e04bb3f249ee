"""Repository slug handling for commands that accept an optional --repo."""

from __future__ import annotations

import subprocess

import click


def detect_repo_from_git() -> str | None:
    """Try to detect the GitHub repo slug from the origin remote URL."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    url = result.stdout.strip()
    # https://github.com/owner/repo.git  →  owner/repo
    # git@github.com:owner/repo.git      →  owner/repo
    if "github.com" not in url:
        return None
    slug = url.split("github.com")[-1].lstrip("/:").removesuffix(".git")
    return slug if "/" in slug else None


def resolve_repo(repo: str | None) -> str:
    """Validate an explicit owner/name slug, or detect one from git."""
    if repo:
        if "/" not in repo:
            raise click.UsageError(f'Repository must be in format "owner/repo", got: {repo}')
        return repo

    detected = detect_repo_from_git()
    if not detected:
        raise click.UsageError("Could not detect the repository from git. Pass --repo owner/name.")
    return detected
