# utils/github_client.py
import logging
from typing import Awaitable, Callable, List, Optional

import httpx

from errors import GitHubError, SubmissionError
from models import Comment, ReviewContext

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"
DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"


def _headers(token: Optional[str], accept: str = "application/vnd.github+json") -> dict:
    headers = {
        "Accept": accept,
        "User-Agent": "PR-Hunk-Reviewer",
    }
    if token:
        headers["Authorization"] = f"token {token}"
    return headers


def _client(token, accept="application/vnd.github+json", transport=None) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=30.0, headers=_headers(token, accept), transport=transport)


def _raise_for_status(resp: httpx.Response, what: str, error_cls=GitHubError):
    if resp.is_success:
        return
    raise error_cls(
        f"{what}: GitHub returned {resp.status_code}: {resp.text}",
        status_code=resp.status_code,
        body=resp.text,
    )


# -----------------------------------------------------------
# Pull request metadata
# -----------------------------------------------------------
async def fetch_review_context(owner: str, repo: str, pull_number: int, *,
                               token: Optional[str] = None, api_base: str = GITHUB_API_BASE,
                               transport: Optional[httpx.AsyncBaseTransport] = None) -> ReviewContext:
    url = f"{api_base}/repos/{owner}/{repo}/pulls/{pull_number}"
    try:
        async with _client(token, transport=transport) as client:
            resp = await client.get(url)
    except httpx.HTTPError as e:
        raise GitHubError(f"Failed to fetch PR #{pull_number}: {e}") from e
    _raise_for_status(resp, f"Failed to fetch PR #{pull_number}")
    j = resp.json()
    return ReviewContext(
        owner=owner,
        repo=repo,
        pull_number=pull_number,
        title=j.get("title") or "",
        description=j.get("body") or "",
    )


# -----------------------------------------------------------
# Diff text, full PR ("opened") or commit range ("synchronize")
# -----------------------------------------------------------
async def _get_diff(url: str, what: str, token, transport) -> str:
    try:
        async with _client(token, accept=DIFF_MEDIA_TYPE, transport=transport) as client:
            resp = await client.get(url)
    except httpx.HTTPError as e:
        raise GitHubError(f"{what}: {e}") from e
    _raise_for_status(resp, what)
    return resp.text


async def fetch_pr_diff(owner: str, repo: str, pull_number: int, *,
                        token: Optional[str] = None, api_base: str = GITHUB_API_BASE,
                        transport: Optional[httpx.AsyncBaseTransport] = None) -> str:
    url = f"{api_base}/repos/{owner}/{repo}/pulls/{pull_number}"
    return await _get_diff(url, f"Failed to fetch diff for PR #{pull_number}", token, transport)


async def fetch_compare_diff(owner: str, repo: str, base: str, head: str, *,
                             token: Optional[str] = None, api_base: str = GITHUB_API_BASE,
                             transport: Optional[httpx.AsyncBaseTransport] = None) -> str:
    url = f"{api_base}/repos/{owner}/{repo}/compare/{base}...{head}"
    return await _get_diff(url, f"Failed to compare {base}...{head}", token, transport)


# -----------------------------------------------------------
# Review submission
# -----------------------------------------------------------
async def create_review(owner: str, repo: str, pull_number: int, comments: List[Comment], *,
                        token: Optional[str] = None, api_base: str = GITHUB_API_BASE,
                        transport: Optional[httpx.AsyncBaseTransport] = None) -> dict:
    """
    Posts every comment in one COMMENT review. GitHub validates the whole
    batch, so a single comment outside the diff rejects all of them.
    """
    url = f"{api_base}/repos/{owner}/{repo}/pulls/{pull_number}/reviews"
    payload = {
        "event": "COMMENT",
        "comments": [c.model_dump() for c in comments],
    }
    try:
        async with _client(token, transport=transport) as client:
            resp = await client.post(url, json=payload)
    except httpx.HTTPError as e:
        raise SubmissionError(f"Failed to submit review: {e}") from e
    _raise_for_status(resp, "Failed to submit review", SubmissionError)
    return resp.json()


ReviewPoster = Callable[[str, str, int, List[Comment]], Awaitable[dict]]


async def submit_review(context: ReviewContext, comments: List[Comment], *,
                        post: ReviewPoster) -> bool:
    if not comments:
        logger.info("No comments to post; skipping review submission")
        return False
    result = await post(context.owner, context.repo, context.pull_number, list(comments))
    logger.info("Posted review %s with %d comments", (result or {}).get("id"), len(comments))
    return True
