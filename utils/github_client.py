# utils/github_client.py

import base64
import logging
from typing import List, Optional
from urllib.parse import quote

import httpx

from errors import HostAPIError
from models import PRContext, ReviewComment

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"
DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"


class GitHubClient:
    """
    Thin async wrapper over the GitHub REST endpoints the reviewer needs.

    Every transport or HTTP status failure surfaces as HostAPIError.
    """

    def __init__(self, token: str, api_base: str = GITHUB_API_BASE, timeout: float = 30.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        # base request headers
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "PR-Review-Annotator",
            "Authorization": f"token {token}",
        }

    async def _request(self, method: str, path: str, *, accept: Optional[str] = None,
                       allow_404: bool = False, **kwargs) -> Optional[httpx.Response]:
        url = f"{self.api_base}{path}"
        headers = {"Accept": accept} if accept else None

        async with httpx.AsyncClient(timeout=self.timeout, headers=self.headers,
                                     transport=self.transport) as client:
            try:
                resp = await client.request(method, url, headers=headers, **kwargs)
            except httpx.RequestError as e:
                raise HostAPIError(f"{method} {path} failed: {e}") from e

        if allow_404 and resp.status_code == 404:
            return None

        # Raise HTTP errors with full body description
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise HostAPIError(
                f"GitHub returned {resp.status_code} for {method} {path}: {resp.text}",
                status_code=resp.status_code,
            ) from e
        return resp

    # -----------------------------------------------------------
    # ✅ PR metadata (title + description)
    # -----------------------------------------------------------
    async def fetch_pr_details(self, owner: str, repo: str, pull_number: int) -> PRContext:
        resp = await self._request("GET", f"/repos/{owner}/{repo}/pulls/{pull_number}")
        j = resp.json()
        return PRContext(
            owner=owner,
            repo=repo,
            pull_number=pull_number,
            title=j.get("title") or "",
            description=j.get("body") or "",
        )

    # -----------------------------------------------------------
    # ✅ Full PR diff (used when the PR is opened)
    # -----------------------------------------------------------
    async def fetch_pr_diff(self, owner: str, repo: str, pull_number: int) -> str:
        resp = await self._request(
            "GET", f"/repos/{owner}/{repo}/pulls/{pull_number}", accept=DIFF_MEDIA_TYPE
        )
        return resp.text

    # -----------------------------------------------------------
    # ✅ Diff between two commits (used when new commits are pushed)
    # -----------------------------------------------------------
    async def fetch_compare_diff(self, owner: str, repo: str, base: str, head: str) -> str:
        resp = await self._request(
            "GET", f"/repos/{owner}/{repo}/compare/{base}...{head}", accept=DIFF_MEDIA_TYPE
        )
        return resp.text

    # -----------------------------------------------------------
    # ✅ File content at a ref (None when the path does not exist)
    # -----------------------------------------------------------
    async def fetch_file_content(self, owner: str, repo: str, path: str, ref: str) -> Optional[str]:
        resp = await self._request(
            "GET", f"/repos/{owner}/{repo}/contents/{quote(path)}", params={"ref": ref}, allow_404=True
        )
        if resp is None:
            logger.info("No content for %s at %s", path, ref)
            return None

        j = resp.json()
        # directories come back as a list, submodules/symlinks without content
        if not isinstance(j, dict) or not isinstance(j.get("content"), str):
            return None
        return base64.b64decode(j["content"]).decode("utf-8", errors="replace")

    # -----------------------------------------------------------
    # ✅ Post one batched review with inline comments
    # -----------------------------------------------------------
    async def create_review(self, owner: str, repo: str, pull_number: int,
                            comments: List[ReviewComment]) -> dict:
        payload = {
            "event": "COMMENT",
            "comments": [c.model_dump() for c in comments],
        }
        resp = await self._request(
            "POST", f"/repos/{owner}/{repo}/pulls/{pull_number}/reviews", json=payload
        )
        logger.info("Posted review with %d comments to %s/%s#%d", len(comments), owner, repo, pull_number)
        return resp.json()
