"""Reduce the three GitHub feedback streams to what still needs a response.

Reviews and conversation comments are filtered against the PR author's last
activity anywhere on the PR: anything at or before that moment is treated as
already seen. Inline threads use a per-thread boundary instead, because a
reply in one thread says nothing about feedback in another.

Nothing here performs I/O or raises on missing fields; incomplete records are
dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from prfeedback_core.bots import is_bot
from prfeedback_core.models import (
    CommentKind,
    ConversationComment,
    FeedbackReport,
    FeedbackSnapshot,
    InlineAnchor,
    InlineMessage,
    InlineThread,
    NormalizedComment,
    ReviewVerdict,
)

logger = logging.getLogger(__name__)


def _is_blank(text: str | None) -> bool:
    return text is None or not text.strip()


def _is_newer(candidate: datetime | None, current: datetime | None) -> bool:
    """Latest-wins comparison where a missing timestamp loses to any real one."""
    if candidate is None:
        return False
    return current is None or candidate > current


def _predates(ts: datetime | None, boundary: datetime | None) -> bool:
    """True if ts is at or before the boundary. Undated records never predate."""
    return boundary is not None and ts is not None and ts <= boundary


def last_author_activity(
    pr_author: str,
    conversation: Iterable[ConversationComment],
    threads: Iterable[InlineThread],
) -> datetime | None:
    """Return the latest time the PR author posted a conversation or inline message."""
    latest: datetime | None = None
    for comment in conversation:
        if comment.author == pr_author and _is_newer(comment.created_at, latest):
            latest = comment.created_at
    for thread in threads:
        for message in thread.messages:
            if message.author == pr_author and _is_newer(message.created_at, latest):
                latest = message.created_at
    return latest


def normalize_reviews(
    reviews: Iterable[ReviewVerdict],
    pr_author: str,
    author_last_activity: datetime | None,
    pr_url: str | None = None,
    bot_patterns: Sequence[str] = (),
) -> list[NormalizedComment]:
    """Keep each reviewer's most recent verdict submitted after the author's last activity."""
    latest_by_author: dict[str, ReviewVerdict] = {}

    for review in reviews:
        author = review.author
        if not author:
            continue
        if is_bot(author, bot_patterns) or author == pr_author:
            continue
        if _predates(review.submitted_at, author_last_activity):
            continue
        current = latest_by_author.get(author)
        if current is None or _is_newer(review.submitted_at, current.submitted_at):
            latest_by_author[author] = review

    results: list[NormalizedComment] = []
    for author, review in latest_by_author.items():
        has_body = not _is_blank(review.body)
        # A bare approval or an empty "commented" review says nothing actionable.
        if review.state == "APPROVED" and not has_body:
            continue
        if not has_body and review.state != "CHANGES_REQUESTED":
            continue
        results.append(
            NormalizedComment(
                id=f"review-{author}",
                kind=CommentKind.REVIEW_SUMMARY,
                author=author,
                body=review.body if has_body else f"[{review.state}]",
                created_at=review.submitted_at,
                state=review.state,
                url=pr_url,
            )
        )

    logger.debug("Kept %d of %d review verdict(s)", len(results), len(latest_by_author))
    return results


def normalize_conversation(
    comments: Iterable[ConversationComment],
    pr_author: str,
    author_last_activity: datetime | None,
    bot_patterns: Sequence[str] = (),
) -> list[NormalizedComment]:
    """Keep non-empty reviewer comments posted after the author's last activity."""
    results: list[NormalizedComment] = []
    for comment in comments:
        author = comment.author
        if not author or _is_blank(comment.body):
            continue
        if is_bot(author, bot_patterns) or author == pr_author:
            continue
        if _predates(comment.created_at, author_last_activity):
            continue
        results.append(
            NormalizedComment(
                id=f"comment-{comment.id}",
                kind=CommentKind.CONVERSATION,
                author=author,
                body=comment.body,
                created_at=comment.created_at,
                url=comment.url,
            )
        )
    return results


def _unanswered_messages(thread: InlineThread, pr_author: str, bot_patterns: Sequence[str]) -> list[InlineMessage]:
    """Reviewer messages in the thread the PR author has not replied to yet, in thread order."""
    candidates = [
        (i, m)
        for i, m in enumerate(thread.messages)
        if m.author and not _is_blank(m.body) and m.author != pr_author and not is_bot(m.author, bot_patterns)
    ]

    author_positions = [i for i, m in enumerate(thread.messages) if m.author == pr_author]
    if not author_positions:
        return [m for _, m in candidates]

    replied_at: datetime | None = None
    for i in author_positions:
        if _is_newer(thread.messages[i].created_at, replied_at):
            replied_at = thread.messages[i].created_at

    if replied_at is None:
        # Author replies carry no timestamps; fall back to reply order.
        last_reply = author_positions[-1]
        return [m for i, m in candidates if i > last_reply]

    return [m for _, m in candidates if m.created_at is not None and m.created_at > replied_at]


def normalize_inline_threads(
    threads: Iterable[InlineThread],
    pr_author: str,
    bot_patterns: Sequence[str] = (),
) -> list[NormalizedComment]:
    """Emit at most one comment per open thread: its latest unanswered reviewer message."""
    results: list[NormalizedComment] = []
    for thread in threads:
        if thread.is_resolved or thread.is_outdated:
            continue

        pending = _unanswered_messages(thread, pr_author, bot_patterns)
        if not pending:
            continue

        latest = pending[-1]
        line = thread.line if thread.line is not None else thread.original_line
        results.append(
            NormalizedComment(
                id=f"inline-{latest.id}",
                kind=CommentKind.INLINE,
                author=latest.author,
                body=latest.body,
                created_at=latest.created_at,
                anchor=InlineAnchor(path=thread.path, line=line, is_resolved=False),
                url=latest.url,
            )
        )
    return results


def _sort_key(comment: NormalizedComment):
    # Undated comments sort first, as if posted at the epoch.
    if comment.created_at is None:
        return (0, 0)
    return (1, comment.created_at)


def merge_and_order(*streams: Iterable[NormalizedComment]) -> list[NormalizedComment]:
    """Concatenate normalized streams and stable-sort them oldest first."""
    merged = [comment for stream in streams for comment in stream]
    return sorted(merged, key=_sort_key)


def normalize_all(snapshot: FeedbackSnapshot, bot_patterns: Sequence[str] = ()) -> FeedbackReport:
    """Run the full pipeline over one fetched snapshot."""
    pr = snapshot.pull_request
    boundary = last_author_activity(pr.author, snapshot.conversation, snapshot.inline_threads)
    if boundary is not None:
        logger.debug("PR author %s last responded at %s", pr.author, boundary.isoformat())

    comments = merge_and_order(
        normalize_reviews(snapshot.reviews, pr.author, boundary, pr_url=pr.url, bot_patterns=bot_patterns),
        normalize_conversation(snapshot.conversation, pr.author, boundary, bot_patterns=bot_patterns),
        normalize_inline_threads(snapshot.inline_threads, pr.author, bot_patterns=bot_patterns),
    )
    return FeedbackReport(pull_request=pr, comments=comments, author_last_activity=boundary)
