from functools import lru_cache

from fastapi import Body, Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

load_dotenv()

from agents.review_agent import InferenceFn
from config import Settings
from diff_parser import parse_unified_diff
from errors import ConfigError, EventPayloadError, GitHubError, MalformedDiffError
from models import ReviewContext, ReviewOutcome, ReviewResponse
from path_filter import filter_files
from pipeline import default_inference, analyze_code, review_event
from utils.log_setup import setup_logging

app = FastAPI(title="PR Hunk Reviewer")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache
def get_settings() -> Settings:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    return settings


def get_inference(settings: Settings = Depends(get_settings)) -> InferenceFn:
    try:
        return default_inference(settings)
    except (ConfigError, ValueError) as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/review-diff", response_model=ReviewResponse, summary="Dry-run review of a unified diff (plain text)")
async def review_diff(
    diff_text: str = Body(..., media_type="text/plain", description="Paste the full unified diff here (plain text)."),
    title: str = "",
    description: str = "",
    settings: Settings = Depends(get_settings),
    infer: InferenceFn = Depends(get_inference),
):
    try:
        files = parse_unified_diff(diff_text)
    except MalformedDiffError as e:
        raise HTTPException(status_code=400, detail=str(e))

    files = filter_files(files, settings.exclude_patterns)
    context = ReviewContext(owner="local", repo="diff", pull_number=0, title=title, description=description)
    result = await analyze_code(
        files, context, infer,
        restrict_to_hunk=settings.restrict_to_hunk,
        max_concurrency=settings.max_concurrency,
    )
    return ReviewResponse(
        review_summary=f"{len(result.comments)} comments generated "
                       f"({result.hunks_reviewed} hunks, {result.hunks_failed} failed)",
        comments=result.comments,
    )


@app.post("/review-event", response_model=ReviewOutcome, summary="Review a pull request from a GitHub pull_request event")
async def review_pr_event(
    event: dict = Body(...),
    settings: Settings = Depends(get_settings),
):
    # the model client is only built once the event has hunks to review
    try:
        return await review_event(event, settings)
    except (EventPayloadError, MalformedDiffError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConfigError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except GitHubError as e:
        raise HTTPException(status_code=502, detail=str(e))


@app.get("/")
def root(settings: Settings = Depends(get_settings)):
    return {
        "status": "PR Hunk Reviewer running",
        "git_integration": bool(settings.github_token),
        "teams_notifications": bool(settings.teams_webhook_url),
    }
