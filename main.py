import asyncio
import json
import logging
import os
import sys
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from agents.llm_client import LLMClient
from config import ReviewConfig
from diff_parser import parse_unified_diff
from errors import ConfigError, DiffParseError, HostAPIError
from models import PRContext, ReviewResponse, TriggerEvent
from orchestrator import ReviewOrchestrator, filter_excluded
from utils.github_client import GitHubClient

# server entry points read credentials from a local .env too
load_dotenv(find_dotenv(usecwd=True))

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_orchestrator(config: ReviewConfig) -> ReviewOrchestrator:
    github = GitHubClient(config.github_token, api_base=config.github_api_base,
                          timeout=config.request_timeout)
    llm = LLMClient(config.gemini_api_key, config.model_name)
    return ReviewOrchestrator(config, github, llm)


def _load_config() -> ReviewConfig:
    try:
        return ReviewConfig.from_env()
    except ConfigError as e:
        raise HTTPException(status_code=500, detail=str(e))


app = FastAPI(title="PR Review Annotator")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/review-event", response_model=ReviewResponse, summary="Run a review for a pull_request event payload")
async def review_event(event: TriggerEvent):
    orchestrator = build_orchestrator(_load_config())
    try:
        outcome = await orchestrator.run(event)
    except DiffParseError as e:
        raise HTTPException(status_code=400, detail=f"Malformed diff: {e}")
    except HostAPIError as e:
        raise HTTPException(status_code=502, detail=f"GitHub request failed: {e}")

    return ReviewResponse(
        review_summary=f"{outcome.status.value}: {len(outcome.comments)} comments "
                       f"({outcome.hunks_failed}/{outcome.hunks_reviewed} hunks without findings due to errors)",
        comments=outcome.comments,
    )


@app.post("/review-diff", response_model=ReviewResponse, summary="Review a unified diff (plain text) without posting")
async def review_diff(
    diff_text: str = Body(..., media_type="text/plain", description="Paste the full unified diff here (plain text)."),
    title: str = "",
    description: str = "",
):
    config = _load_config()
    try:
        files = filter_excluded(parse_unified_diff(diff_text), config.exclude_patterns)
    except DiffParseError as e:
        raise HTTPException(status_code=400, detail=f"Malformed diff: {e}")
    if not files:
        raise HTTPException(status_code=400, detail="No files parsed from diff")

    pr = PRContext(owner="", repo="", pull_number=0, title=title, description=description)
    outcome = await build_orchestrator(config).analyze_code(files, pr, fetch_content=False)
    return ReviewResponse(review_summary=f"{len(outcome.comments)} comments generated", comments=outcome.comments)


@app.get("/")
def root():
    return {"status": "PR Review Annotator running", "git_integration": bool(os.getenv("GITHUB_TOKEN"))}


def run_action(event_path: Optional[str] = None) -> int:
    """Run once for the GitHub Actions event file; returns the process exit status."""
    config = ReviewConfig.from_env()
    logging.getLogger().setLevel(getattr(logging, config.log_level, logging.INFO))

    event_path = event_path or os.environ.get("GITHUB_EVENT_PATH", "")
    with open(event_path, encoding="utf-8") as f:
        event = TriggerEvent.model_validate(json.load(f))

    outcome = asyncio.run(build_orchestrator(config).run(event))
    logger.info("Run finished: %s, %d comments", outcome.status.value, len(outcome.comments))
    return 0


def cli() -> int:
    load_dotenv()
    configure_logging(os.environ.get("LOG_LEVEL", "INFO"))
    try:
        return run_action()
    except Exception:
        logger.exception("Review run failed")
        return 1


if __name__ == "__main__":
    sys.exit(cli())
