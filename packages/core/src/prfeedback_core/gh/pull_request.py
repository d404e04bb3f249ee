"""GitHub adapters: fetch a pull request's feedback and map it onto prfeedback models.

Reviews and conversation comments come from the REST API. Review threads come
from GraphQL because REST does not expose the resolved/outdated flags.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

import requests
from github import Github, GithubException

from prfeedback_core.models import (
    ChangedFile,
    ConversationComment,
    FeedbackSnapshot,
    InlineMessage,
    InlineThread,
    PullRequestInfo,
    ReviewVerdict,
)

logger = logging.getLogger(__name__)

REVIEW_THREADS_QUERY = """
query($owner: String!, $repo: String!, $prNumber: Int!, $cursor: String) {
  repository(owner: $owner, name: $repo) {
    pullRequest(number: $prNumber) {
      reviewThreads(first: 100, after: $cursor) {
        pageInfo { hasNextPage endCursor }
        nodes {
          path
          line
          originalLine
          isResolved
          isOutdated
          comments(first: 100) {
            nodes {
              id
              author { login }
              createdAt
              body
              url
            }
          }
        }
      }
    }
  }
}
"""


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def _login(user) -> str | None:
    return user.login if user is not None else None


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a GitHub ISO-8601 timestamp ("2024-05-01T12:00:00Z")."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def fetch_pull_request_info(pr) -> PullRequestInfo:
    state = "merged" if pr.merged else pr.state
    return PullRequestInfo(
        number=pr.number,
        title=pr.title or "",
        url=pr.html_url,
        author=_login(pr.user) or "",
        state=state,
        head_ref=pr.head.ref,
        base_ref=pr.base.ref,
        created_at=pr.created_at,
        updated_at=pr.updated_at,
    )


def fetch_reviews(pr) -> list[ReviewVerdict]:
    return [
        ReviewVerdict(
            author=_login(r.user),
            state=r.state,
            body=r.body,
            submitted_at=r.submitted_at,
        )
        for r in pr.get_reviews()
    ]


def fetch_conversation_comments(pr) -> list[ConversationComment]:
    return [
        ConversationComment(
            id=c.id,
            author=_login(c.user),
            body=c.body,
            created_at=c.created_at,
            url=c.html_url,
        )
        for c in pr.get_issue_comments()
    ]


def _parse_thread(node: dict) -> InlineThread:
    messages = [
        InlineMessage(
            id=str(c["id"]),
            author=(c.get("author") or {}).get("login"),
            body=c.get("body") or "",
            created_at=parse_timestamp(c.get("createdAt")),
            url=c.get("url"),
        )
        for c in (node.get("comments") or {}).get("nodes") or []
    ]
    return InlineThread(
        path=node.get("path") or "",
        line=node.get("line"),
        original_line=node.get("originalLine"),
        is_resolved=bool(node.get("isResolved")),
        is_outdated=bool(node.get("isOutdated")),
        messages=messages,
    )


def fetch_inline_threads(repo, pr_number: int) -> list[InlineThread]:
    """Fetch every review thread on the PR, following GraphQL cursors."""
    owner, name = repo.full_name.split("/", 1)
    threads: list[InlineThread] = []
    cursor = None
    while True:
        variables = {"owner": owner, "repo": name, "prNumber": pr_number, "cursor": cursor}
        _, data = repo.requester.graphql_query(REVIEW_THREADS_QUERY, variables)
        pull = ((data.get("data") or {}).get("repository") or {}).get("pullRequest") or {}
        review_threads = pull.get("reviewThreads") or {}
        threads.extend(_parse_thread(node) for node in review_threads.get("nodes") or [])
        page = review_threads.get("pageInfo") or {}
        if not page.get("hasNextPage"):
            return threads
        cursor = page.get("endCursor")


def fetch_changed_files(pr, max_patch_chars: int = 20000) -> list[ChangedFile]:
    files = []
    for f in sorted(pr.get_files(), key=lambda f: f.filename):
        patch = f.patch or ""
        if len(patch) > max_patch_chars:
            patch = patch[:max_patch_chars] + "\n... [diff truncated]"
        files.append(ChangedFile(filename=f.filename, status=f.status, patch=patch))
    return files


def _fetch_or_empty(label: str, fetch, *args) -> list:
    """Run one source fetch; a GitHub or network failure degrades to no records for that source."""
    try:
        return fetch(*args)
    except (GithubException, requests.exceptions.RequestException) as e:
        logger.warning("Could not fetch %s (continuing without them): %s", label, e)
        return []


def fetch_snapshot(
    repo,
    pr_number: int,
    include_diff: bool = False,
    max_patch_chars: int = 20000,
) -> FeedbackSnapshot:
    """Fetch the PR and all three feedback sources as one snapshot.

    The three comment sources are independent, so they are fetched in parallel.
    """
    try:
        pr = get_pull(repo, pr_number)
    except GithubException:
        raise ValueError(f"PR #{pr_number} not found in {repo.full_name}.")

    pull_request = fetch_pull_request_info(pr)

    with ThreadPoolExecutor(max_workers=3) as pool:
        reviews = pool.submit(_fetch_or_empty, "reviews", fetch_reviews, pr)
        conversation = pool.submit(_fetch_or_empty, "PR comments", fetch_conversation_comments, pr)
        threads = pool.submit(_fetch_or_empty, "inline comments", fetch_inline_threads, repo, pr_number)
        snapshot = FeedbackSnapshot(
            pull_request=pull_request,
            reviews=reviews.result(),
            conversation=conversation.result(),
            inline_threads=threads.result(),
        )

    if include_diff:
        snapshot.changed_files = _fetch_or_empty("changed files", fetch_changed_files, pr, max_patch_chars)

    return snapshot
