import asyncio
import json
import logging
from functools import partial
from typing import Awaitable, Callable, List, Optional

import httpx
from pydantic import ValidationError

from agents.llm_client import GeminiClient
from agents.review_agent import InferenceFn, build_review_prompt, make_inference
from comment_mapper import map_suggestions
from config import Settings
from diff_parser import parse_unified_diff
from errors import EventPayloadError
from models import (
    AnnotationResult,
    DiffFile,
    PullRequestEvent,
    ReviewContext,
    ReviewOutcome,
)
from path_filter import filter_files
from utils.github_client import (
    create_review,
    fetch_compare_diff,
    fetch_pr_diff,
    fetch_review_context,
    submit_review,
)
from utils.notifier import send_teams_message

logger = logging.getLogger(__name__)

SUPPORTED_ACTIONS = ("opened", "synchronize")

Notifier = Callable[[ReviewContext, int], Awaitable[bool]]


async def analyze_code(files: List[DiffFile], context: ReviewContext, infer: InferenceFn, *,
                       restrict_to_hunk: bool = False, max_concurrency: int = 1) -> AnnotationResult:
    """
    Review every hunk of every file and collect the resulting comments in
    file, hunk, then model order. A hunk whose inference fails adds nothing.
    """
    work = [(f, h) for f in files for h in f.hunks]
    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def run(file, hunk):
        async with semaphore:
            try:
                return await infer(build_review_prompt(file, hunk, context))
            except Exception as e:
                logger.warning("Inference failed for %s: %s", file.target_path, e)
                return None

    if max_concurrency > 1:
        # gather keeps input order, so the output stays deterministic
        outputs = await asyncio.gather(*(run(f, h) for f, h in work))
    else:
        outputs = [await run(f, h) for f, h in work]

    result = AnnotationResult(hunks_reviewed=len(work))
    for (file, hunk), suggestions in zip(work, outputs):
        if suggestions is None:
            logger.warning("No review for %s %s", file.target_path, hunk.header)
            result.hunks_failed += 1
            continue
        result.comments.extend(
            map_suggestions(file, hunk, suggestions, restrict_to_hunk=restrict_to_hunk)
        )
    return result


def load_event(path: Optional[str]) -> dict:
    if not path:
        raise EventPayloadError("GITHUB_EVENT_PATH is not set")
    try:
        with open(path, encoding="utf-8") as f:
            event = json.load(f)
    except (OSError, ValueError) as e:
        raise EventPayloadError(f"Could not read event payload {path}: {e}") from e
    if not isinstance(event, dict):
        raise EventPayloadError("Event payload is not a JSON object")
    return event


def parse_event(event: dict) -> PullRequestEvent:
    try:
        pr_event = PullRequestEvent.model_validate(event)
    except ValidationError as e:
        raise EventPayloadError(f"Malformed pull_request event: {e}") from e
    if pr_event.action == "synchronize" and not (pr_event.before and pr_event.after):
        raise EventPayloadError("synchronize event without before/after commits")
    return pr_event


def default_inference(settings: Settings) -> InferenceFn:
    settings.require("gemini_api_key")
    client = GeminiClient(
        settings.gemini_api_key,
        model=settings.gemini_model,
        api_endpoint=settings.gemini_api_endpoint,
    )
    return make_inference(client.generate_json, timeout=settings.llm_timeout)


async def review_event(event: dict, settings: Settings, *,
                       infer: Optional[InferenceFn] = None,
                       notify: Optional[Notifier] = None,
                       transport: Optional[httpx.AsyncBaseTransport] = None) -> ReviewOutcome:
    """
    Run one review for a pull_request event: fetch the diff, annotate every
    retained hunk, post a single review and send the notification.
    """
    if not isinstance(event, dict):
        raise EventPayloadError("Event payload is not a JSON object")
    action = event.get("action")
    if action not in SUPPORTED_ACTIONS:
        logger.info("Unsupported event action: %s", action)
        return ReviewOutcome(event=str(action), skipped_reason=f"unsupported action {action!r}")

    pr_event = parse_event(event)
    settings.require("github_token")
    owner = pr_event.repository.owner.login
    repo = pr_event.repository.name
    gh = dict(token=settings.github_token, api_base=settings.github_api_url, transport=transport)

    context = await fetch_review_context(owner, repo, pr_event.number, **gh)
    logger.info("PR details: %s #%d %r", context.full_name, context.pull_number, context.title)
    outcome = ReviewOutcome(event=action, pull_number=context.pull_number)

    if action == "opened":
        diff = await fetch_pr_diff(owner, repo, pr_event.number, **gh)
    else:
        diff = await fetch_compare_diff(owner, repo, pr_event.before, pr_event.after, **gh)

    if not diff or not diff.strip():
        logger.info("No diff found")
        outcome.skipped_reason = "empty diff"
        return outcome

    files = filter_files(parse_unified_diff(diff), settings.exclude_patterns)
    logger.info("Files to review: %s", [f.target_path for f in files])
    outcome.files_reviewed = len(files)

    if infer is None and any(f.hunks for f in files):
        infer = default_inference(settings)
    annotations = await analyze_code(
        files, context, infer,
        restrict_to_hunk=settings.restrict_to_hunk,
        max_concurrency=settings.max_concurrency,
    )
    outcome.hunks_reviewed = annotations.hunks_reviewed
    outcome.hunks_failed = annotations.hunks_failed
    outcome.comments = annotations.comments
    logger.info("Generated %d comments", len(annotations.comments))

    outcome.submitted = await submit_review(
        context, annotations.comments, post=partial(create_review, **gh)
    )

    if outcome.submitted or settings.notify_on_empty:
        if notify is None:
            notify = partial(send_teams_message, webhook_url=settings.teams_webhook_url)
        try:
            outcome.notified = await notify(context, len(annotations.comments))
        except Exception as e:
            logger.error("Notification failed: %s", e)
    return outcome
