"""Heuristic detection of automated comment authors.

Matching is by login name only. A human whose login happens to end in "bot"
is hidden too; a bot missing from the list leaks into the prompt, so the list
leans towards matching more. Teams can extend it with ``bot_patterns`` in
.prfeedback.yml.
"""

from __future__ import annotations

from collections.abc import Iterable

BOT_AUTHOR_PATTERNS = (
    "github-actions",
    "sonar",
    "sonarcloud",
    "sonarqube",
    "dependabot",
    "renovate",
    "codecov",
    "vercel",
    "netlify",
    "circleci",
    "travisci",
    "sizebot",
    "[bot]",
    "-bot",
    "bot-",
)


def is_bot(author: str, extra_patterns: Iterable[str] = ()) -> bool:
    """Return True if the login looks like an automation account (case-insensitive)."""
    login = author.lower()
    if login.endswith("bot"):
        return True
    for pattern in (*BOT_AUTHOR_PATTERNS, *extra_patterns):
        if pattern and pattern.lower() in login:
            return True
    return False
