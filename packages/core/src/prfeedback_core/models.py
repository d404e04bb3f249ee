"""Feedback data models.

Raw records mirror what the GitHub adapters fetch; NormalizedComment is the
single shape every source is reduced to before rendering.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


@dataclass
class PullRequestInfo:
    """Identity and metadata of the pull request being collected."""

    number: int
    title: str
    url: str
    author: str
    state: str  # "open" | "closed" | "merged"
    head_ref: str
    base_ref: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class ReviewVerdict:
    """One review submission. author is None for deleted accounts."""

    author: str | None
    state: str  # "APPROVED" | "CHANGES_REQUESTED" | "COMMENTED" | ...
    body: str | None = None
    submitted_at: datetime | None = None


@dataclass
class ConversationComment:
    """A top-level message in the pull request conversation."""

    id: int
    author: str | None
    body: str | None
    created_at: datetime | None = None
    url: str | None = None


@dataclass
class InlineMessage:
    id: str
    author: str | None
    body: str
    created_at: datetime | None = None
    url: str | None = None


@dataclass
class InlineThread:
    """A review thread anchored to a file position.

    messages keep the order GitHub returns them in, which is the reply order.
    """

    path: str
    line: int | None = None
    original_line: int | None = None
    is_resolved: bool = False
    is_outdated: bool = False
    messages: list[InlineMessage] = field(default_factory=list)


@dataclass
class ChangedFile:
    filename: str
    status: str
    patch: str = ""


class CommentKind(str, Enum):
    INLINE = "inline"
    REVIEW_SUMMARY = "review_summary"
    CONVERSATION = "conversation"


@dataclass(frozen=True)
class InlineAnchor:
    """Code position of an inline comment. Only inline comments carry one."""

    path: str
    line: int | str | None = None
    is_resolved: bool = False


@dataclass(frozen=True)
class NormalizedComment:
    id: str  # namespaced by kind: "review-…", "comment-…", "inline-…"
    kind: CommentKind
    author: str
    body: str
    created_at: datetime | None = None
    state: str | None = None  # review verdict, review_summary only
    anchor: InlineAnchor | None = None
    url: str | None = None
    is_bot: bool = False

    @property
    def location(self) -> str | None:
        """Return "path:line" (or just "path") for inline comments, None otherwise."""
        if self.anchor is None:
            return None
        if self.anchor.line is None:
            return self.anchor.path
        return f"{self.anchor.path}:{self.anchor.line}"


@dataclass
class FeedbackSnapshot:
    """Everything fetched for one pull request, handed to normalization at once."""

    pull_request: PullRequestInfo
    reviews: list[ReviewVerdict] = field(default_factory=list)
    conversation: list[ConversationComment] = field(default_factory=list)
    inline_threads: list[InlineThread] = field(default_factory=list)
    changed_files: list[ChangedFile] = field(default_factory=list)


@dataclass
class FeedbackReport:
    """Result of normalize_all: the ordered comments ready for rendering."""

    pull_request: PullRequestInfo
    comments: list[NormalizedComment] = field(default_factory=list)
    author_last_activity: datetime | None = None
