"""GitHub Contents API client implementing the RepositoryHost protocol.

One client is built per tool request and bound to that request's token. Both
operations hit `GET /repos/{owner}/{repo}/contents/{path}`; GitHub answers
with a JSON array for a directory and a JSON object for anything else, which
is mapped onto DirectoryListing / SingleEntry.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from urllib.parse import quote

import httpx

from core.errors import ExternalServiceError, InvalidCredentialError, NotFoundError
from core.models import DirectoryListing, HostEntry, HostResponse, RepositoryRef, SingleEntry
from core.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

_KINDS = {"file", "dir", "symlink", "submodule"}


def parse_entry(item: Mapping[str, Any]) -> HostEntry:
    kind = str(item.get("type") or "file")
    if kind not in _KINDS:
        kind = "file"
    try:
        size = int(item.get("size") or 0)
    except (TypeError, ValueError):
        size = 0
    return HostEntry(
        name=str(item.get("name") or ""),
        path=str(item.get("path") or ""),
        kind=kind,  # type: ignore[arg-type]
        size=size,
        download_url=item.get("download_url"),
        content=item.get("content"),
        encoding=item.get("encoding"),
    )


def parse_contents_response(data: Any) -> HostResponse:
    if isinstance(data, list):
        return DirectoryListing(entries=tuple(parse_entry(item) for item in data if isinstance(item, Mapping)))
    if isinstance(data, Mapping):
        return SingleEntry(entry=parse_entry(data))
    raise ExternalServiceError("Unexpected contents payload from GitHub")


class GitHubClient:
    """Async GitHub client bound to one token.

    Key behavior:
      - list_entries / get_entry map the Contents API onto host responses.
      - Honors server-side throttling (Retry-After, rate-limit reset) via RateLimiter.
      - 401 -> InvalidCredentialError, 404 -> NotFoundError, other failures ->
        ExternalServiceError.
    """

    BASE_URL = "https://api.github.com"
    JSON_ACCEPT = "application/vnd.github+json"
    API_VERSION = "2022-11-28"

    _MAX_RATE_LIMIT_RETRIES = 2  # total attempts = 1 + retries

    def __init__(
        self,
        token: str,
        *,
        base_url: Optional[str] = None,
        timeout: float = 20.0,
        verify: bool = True,
        ref: Optional[str] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        self._token = (token or "").strip()
        if not self._token:
            raise InvalidCredentialError("GitHub token is required")

        self._base_url = (base_url or self.BASE_URL).rstrip("/")
        self._timeout = float(timeout)
        self._verify = bool(verify)
        self._ref = (ref or "").strip() or None

        self._headers = self._build_headers()
        self._rate_limiter = rate_limiter or RateLimiter()

    def __repr__(self) -> str:
        # Keep the token out of reprs and tracebacks
        return f"GitHubClient(base_url={self._base_url!r}, ref={self._ref!r})"

    async def list_entries(self, repo_ref: RepositoryRef, path: str = "") -> HostResponse:
        """List a directory, or describe a single entry when `path` isn't one."""
        return await self._get_contents(repo_ref, path, context="list_entries")

    async def get_entry(self, repo_ref: RepositoryRef, path: str) -> HostResponse:
        """Fetch `path`; files come back with their base64 content inlined."""
        return await self._get_contents(repo_ref, path, context="get_entry")

    # --- HTTP helpers ---

    async def _get_contents(self, repo_ref: RepositoryRef, path: str, *, context: str) -> HostResponse:
        url = self._contents_url(repo_ref, path)
        params = {"ref": self._ref} if self._ref else None

        async with self._create_client() as client:
            resp = await self._request(client, url, params=params)

            if resp.status_code == 401:
                raise InvalidCredentialError("GitHub rejected the token")
            if resp.status_code == 404:
                raise NotFoundError(f"Not found: {repo_ref.full_name}/{path}")
            self._raise_for_status(resp, context=context)

            try:
                data = resp.json()
            except ValueError as e:
                raise self._external(context, e) from e
            return parse_contents_response(data)

    def _contents_url(self, repo_ref: RepositoryRef, path: str) -> str:
        owner = quote(repo_ref.owner, safe="")
        repo = quote(repo_ref.repo, safe="")
        clean = (path or "").strip().strip("/")
        if not clean:
            return f"/repos/{owner}/{repo}/contents"
        return f"/repos/{owner}/{repo}/contents/{quote(clean, safe='/')}"

    def _build_headers(self) -> dict[str, str]:
        return {
            "Accept": self.JSON_ACCEPT,
            "Authorization": f"Bearer {self._token}",
            "User-Agent": "github-mcp",
            "X-GitHub-Api-Version": self.API_VERSION,
        }

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=self._timeout,
            verify=self._verify,
        )

    def _external(self, context: str, err: BaseException) -> ExternalServiceError:
        return ExternalServiceError(f"GitHub request failed ({context}): {err}")

    def _raise_for_status(self, resp: httpx.Response, *, context: str) -> None:
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise self._external(context, e) from e

    async def _request(
        self,
        client: httpx.AsyncClient,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Response:
        """GET with bounded retries for explicit throttling signals."""
        attempts = self._MAX_RATE_LIMIT_RETRIES + 1

        for attempt in range(attempts):
            try:
                resp = await client.get(url, params=dict(params or {}))
            except httpx.HTTPError as e:
                raise self._external(f"GET {url}", e) from e

            logger.debug("GET %s -> %s", url, resp.status_code)

            if attempt < attempts - 1:
                should_retry = await self._rate_limiter.maybe_sleep_and_retry(resp)
                if should_retry:
                    continue

            return resp

        raise RuntimeError("Unreachable: _request did not return a response")
