import asyncio
import logging
from enum import Enum
from fnmatch import fnmatch
from typing import List, Optional, Sequence

from pydantic import BaseModel

from agents.comment_writer import create_comments
from agents.review_agent import review_hunk
from config import ReviewConfig
from diff_parser import parse_unified_diff
from models import DiffFile, DiffHunk, PRContext, ReviewComment, TriggerEvent

logger = logging.getLogger(__name__)


class TriggerKind(str, Enum):
    OPENED = "opened"
    SYNCHRONIZE = "synchronize"
    OTHER = "other"

    @classmethod
    def from_action(cls, action: str) -> "TriggerKind":
        try:
            return cls(action)
        except ValueError:
            return cls.OTHER


class RunStatus(str, Enum):
    SKIPPED = "skipped"
    NO_DIFF = "no_diff"
    NO_COMMENTS = "no_comments"
    SUBMITTED = "submitted"


class RunOutcome(BaseModel):
    status: RunStatus
    comments: List[ReviewComment] = []
    hunks_reviewed: int = 0
    hunks_failed: int = 0


class HunkOutcome(BaseModel):
    comments: List[ReviewComment]
    failed: bool = False


def filter_excluded(files: Sequence[DiffFile], patterns: Sequence[str]) -> List[DiffFile]:
    if not patterns:
        return list(files)
    kept = []
    for f in files:
        if any(fnmatch(f.path_to, pattern) for pattern in patterns):
            logger.info("Excluding %s", f.path_to)
            continue
        kept.append(f)
    return kept


class ReviewOrchestrator:
    """
    Drives one review run: fetch context, fetch and parse the diff, review
    each hunk with the model and submit all surviving comments at once.
    """

    def __init__(self, config: ReviewConfig, github, llm):
        self.config = config
        self.github = github
        self.llm = llm

    async def run(self, event: TriggerEvent) -> RunOutcome:
        owner = event.repository.owner.login
        repo = event.repository.name
        logger.info("Review run for %s/%s#%d (action=%s)", owner, repo, event.number, event.action)

        pr = await self.github.fetch_pr_details(owner, repo, event.number)

        diff_text = await self._fetch_diff(event, pr)
        if diff_text is None:
            logger.info("Unsupported event action %r, nothing to do", event.action)
            return RunOutcome(status=RunStatus.SKIPPED)
        if not diff_text.strip():
            logger.info("No diff found")
            return RunOutcome(status=RunStatus.NO_DIFF)

        files = filter_excluded(parse_unified_diff(diff_text), self.config.exclude_patterns)
        outcome = await self.analyze_code(files, pr)

        if outcome.comments:
            await self.github.create_review(pr.owner, pr.repo, pr.pull_number, outcome.comments)
            outcome.status = RunStatus.SUBMITTED
        return outcome

    async def _fetch_diff(self, event: TriggerEvent, pr: PRContext) -> Optional[str]:
        kind = TriggerKind.from_action(event.action)
        if kind is TriggerKind.OPENED:
            return await self.github.fetch_pr_diff(pr.owner, pr.repo, pr.pull_number)
        if kind is TriggerKind.SYNCHRONIZE:
            if not event.before or not event.after:
                logger.warning("synchronize event without before/after commits, skipping")
                return None
            return await self.github.fetch_compare_diff(pr.owner, pr.repo, event.before, event.after)
        return None

    async def analyze_code(self, files: Sequence[DiffFile], pr: PRContext,
                           fetch_content: bool = True) -> RunOutcome:
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def review_one(file: DiffFile, hunk: DiffHunk, content: Optional[str]) -> HunkOutcome:
            async with semaphore:
                result = await review_hunk(self.llm, file, hunk, pr, content)
            if not result.ok:
                logger.warning("No findings for %s %s: %s", file.path_to, hunk.header, result.reason)
                return HunkOutcome(comments=[], failed=True)
            return HunkOutcome(comments=create_comments(file, hunk, result.entries))

        reviewable = [f for f in files if not f.is_deleted]
        # all host fetches happen before any review coroutine exists
        contents = []
        for file in reviewable:
            content = None
            if fetch_content:
                content = await self.github.fetch_file_content(
                    pr.owner, pr.repo, file.path_to, f"pull/{pr.pull_number}/head"
                )
            contents.append(content)

        tasks = [
            review_one(file, hunk, content)
            for file, content in zip(reviewable, contents)
            for hunk in file.hunks
        ]

        logger.info("Reviewing %d hunks across %d files", len(tasks), len(files))
        results = await asyncio.gather(*tasks, return_exceptions=True)

        comments = []
        failed = 0
        for res in results:
            if isinstance(res, Exception):
                logger.error("Error reviewing hunk: %s", res)
                failed += 1
                continue
            failed += res.failed
            comments.extend(res.comments)

        logger.info("%d comments from %d hunks (%d failed)", len(comments), len(results), failed)
        return RunOutcome(
            status=RunStatus.NO_COMMENTS,
            comments=comments,
            hunks_reviewed=len(results),
            hunks_failed=failed,
        )
