"""Render normalized PR feedback as a Markdown prompt for a coding agent."""

from __future__ import annotations

import re
from collections.abc import Sequence

from prfeedback_core.models import ChangedFile, CommentKind, NormalizedComment, PullRequestInfo

_KIND_LABELS = {
    CommentKind.INLINE: "Inline code comment",
    CommentKind.REVIEW_SUMMARY: "Review summary",
    CommentKind.CONVERSATION: "PR conversation",
}

_BACKTICK_RUN_RE = re.compile(r"`+")


def _fence(text: str) -> str:
    """Return a backtick fence longer than any backtick run inside text."""
    longest = max((len(m.group(0)) for m in _BACKTICK_RUN_RE.finditer(text)), default=0)
    return "`" * max(3, longest + 1)


def _format_kind(kind: CommentKind) -> str:
    return _KIND_LABELS.get(kind, str(kind))


def _render_comment(number: int, comment: NormalizedComment) -> list[str]:
    lines = [f"### Comment #{number}", ""]
    lines.append(f"- **Author:** @{comment.author}" + (" 🤖 (bot)" if comment.is_bot else ""))
    lines.append(f"- **Type:** {_format_kind(comment.kind)}")
    if comment.location:
        lines.append(f"- **Location:** `{comment.location}`")
    if comment.state:
        lines.append(f"- **Review State:** {comment.state}")
    if comment.url:
        lines.append(f"- **Link:** {comment.url}")
    fence = _fence(comment.body)
    lines.extend(["", "**Comment:**", "", fence, comment.body, fence, ""])
    return lines


def _render_changed_files(files: Sequence[ChangedFile]) -> list[str]:
    lines = ["---", "", "## Changed Files", ""]
    for f in files:
        lines.append(f"### `{f.filename}` ({f.status})")
        lines.append("")
        if f.patch:
            fence = _fence(f.patch)
            lines.extend([fence + "diff", f.patch, fence])
        else:
            lines.append("_No textual diff available._")
        lines.append("")
    return lines


def render_prompt(
    pr: PullRequestInfo,
    comments: Sequence[NormalizedComment],
    changed_files: Sequence[ChangedFile] | None = None,
) -> str:
    """Build the Markdown document. Comments are rendered in the order given."""
    lines = [f"# PR Review Analysis: {pr.title}", ""]
    lines.append(f"**PR URL:** {pr.url}")
    lines.append(f"**Author:** @{pr.author}")
    lines.append(f"**Branch:** `{pr.head_ref}` → `{pr.base_ref}`")
    lines.append(f"**State:** {pr.state}")
    lines.append("")

    lines += [
        "---",
        "",
        "## Instructions",
        "",
        "Analyze all the PR review comments below. For each comment, decide:",
        "",
        "1. **FIX** — The comment points to a real issue that needs code changes",
        "2. **REPLY** — The comment is a question, suggestion, or needs clarification",
        "3. **IGNORE** — Bot/automated comment or not actionable",
        "",
        "Then:",
        "",
        "1. **Make all necessary code fixes** for FIX items (minimal, safe changes)",
        "2. **At the end, provide a Report** with:",
        "   - List of all comments with your classification (FIX/REPLY/IGNORE)",
        "   - For FIX items: what you changed and why",
        "   - For REPLY items: draft a short, professional reply to post on GitHub",
        "   - For IGNORE items: brief reason why ignored",
        "",
    ]

    lines += ["---", "", "## PR Review Comments", ""]
    lines.append(f"Total: **{len(comments)}** comments")
    lines.append("")
    if not comments:
        lines.append("_No unaddressed feedback. Nothing to do._")
        lines.append("")
    for number, comment in enumerate(comments, 1):
        lines.extend(_render_comment(number, comment))

    if changed_files:
        lines.extend(_render_changed_files(changed_files))

    lines += [
        "---",
        "",
        "## Report Template",
        "",
        "After making fixes, fill out this report:",
        "",
        "````markdown",
        "# PR Review Response Report",
        "",
        "## Summary",
        "- FIX: X items",
        "- REPLY: X items",
        "- IGNORE: X items",
        "",
        "## Details",
        "",
        "### Comment #1",
        "- **Classification:** FIX / REPLY / IGNORE",
        "- **Action taken:** [describe changes or reply]",
        "- **GitHub Reply:** (if needed)",
        "> Your reply text here",
        "",
        "### Comment #2",
        "...",
        "````",
        "",
    ]
    return "\n".join(lines)
