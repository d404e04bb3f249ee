"""Tests for Markdown prompt rendering."""

from datetime import datetime, timezone

from prfeedback_core.models import ChangedFile, CommentKind, InlineAnchor, NormalizedComment, PullRequestInfo
from prfeedback_core.render import render_prompt

PR = PullRequestInfo(
    number=7,
    title="Add retries",
    url="https://github.com/owner/repo/pull/7",
    author="alice",
    state="open",
    head_ref="feature/retries",
    base_ref="main",
)

WHEN = datetime(2024, 5, 1, tzinfo=timezone.utc)


def inline_comment(body="but what about Y?", line=10):
    return NormalizedComment(
        id="inline-m3",
        kind=CommentKind.INLINE,
        author="dave",
        body=body,
        created_at=WHEN,
        anchor=InlineAnchor(path="src/app.py", line=line),
        url="https://github.com/owner/repo/pull/7#discussion_m3",
    )


def review_comment():
    return NormalizedComment(
        id="review-bob",
        kind=CommentKind.REVIEW_SUMMARY,
        author="bob",
        body="[CHANGES_REQUESTED]",
        created_at=WHEN,
        state="CHANGES_REQUESTED",
        url=PR.url,
    )


class TestRenderPrompt:
    def test_header_contains_pr_metadata(self):
        text = render_prompt(PR, [])
        assert "# PR Review Analysis: Add retries" in text
        assert "**PR URL:** https://github.com/owner/repo/pull/7" in text
        assert "**Author:** @alice" in text
        assert "`feature/retries` → `main`" in text
        assert "**State:** open" in text

    def test_instructions_and_report_template_present(self):
        text = render_prompt(PR, [])
        assert "## Instructions" in text
        assert "**FIX**" in text and "**REPLY**" in text and "**IGNORE**" in text
        assert "## Report Template" in text

    def test_empty_comment_list(self):
        text = render_prompt(PR, [])
        assert "Total: **0** comments" in text
        assert "No unaddressed feedback" in text
        assert "### Comment #1\n" not in text.split("## Report Template")[0]

    def test_inline_comment_rendered_with_location(self):
        text = render_prompt(PR, [inline_comment()])
        assert "### Comment #1" in text
        assert "- **Author:** @dave" in text
        assert "- **Type:** Inline code comment" in text
        assert "- **Location:** `src/app.py:10`" in text
        assert "```\nbut what about Y?\n```" in text

    def test_review_summary_shows_state(self):
        text = render_prompt(PR, [review_comment()])
        assert "- **Type:** Review summary" in text
        assert "- **Review State:** CHANGES_REQUESTED" in text
        assert "Location" not in text

    def test_comments_numbered_in_given_order(self):
        text = render_prompt(PR, [review_comment(), inline_comment()])
        assert text.index("@bob") < text.index("@dave")
        assert "### Comment #2" in text
        assert "Total: **2** comments" in text

    def test_fence_longer_than_backticks_in_body(self):
        body = "Use this:\n```python\nx = 1\n```"
        text = render_prompt(PR, [inline_comment(body=body)])
        assert "````\n" + body + "\n````" in text

    def test_changed_files_section_optional(self):
        files = [ChangedFile("src/app.py", "modified", "@@ -1 +1 @@\n-a\n+b"), ChangedFile("logo.png", "added")]
        without = render_prompt(PR, [inline_comment()])
        with_files = render_prompt(PR, [inline_comment()], files)
        assert "## Changed Files" not in without
        assert "## Changed Files" in with_files
        assert "### `src/app.py` (modified)" in with_files
        assert "```diff\n@@ -1 +1 @@" in with_files
        assert "_No textual diff available._" in with_files
