"""Request-level orchestration behind the two repository tools.

RepositoryInspector validates inputs, builds a host for the request's token,
runs traversal / collection / content fetch and shapes the response payload.
Every outcome, including failures, comes back as a plain dict: the tools
serialize it to JSON and never see an exception other than task cancellation.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, Optional

from core.broadcaster import Broadcaster
from core.collector import collect
from core.content import fetch_content
from core.errors import InvalidCredentialError, ValidationError
from core.events import EventKind
from core.interfaces import HostFactory
from core.models import RepositoryRef, TraversalResult
from core.traversal import fetch_repository

logger = logging.getLogger(__name__)

INVALID_TOKEN = "Invalid GitHub token"
INVALID_REQUEST = "Invalid request"
CANCELLED = "Request cancelled"
REPOSITORY_ERROR = "Error processing repository request"
FILE_NOT_FOUND = "File not found or content could not be retrieved"
FILE_ERROR = "Error processing file request"


def _error(message: str, details: Optional[str] = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {"error": message}
    if details:
        out["details"] = details
    return out


def validate_token(token: Optional[str]) -> str:
    if not isinstance(token, str) or not token.strip():
        raise InvalidCredentialError(INVALID_TOKEN)
    return token.strip()


def validate_path(path: Optional[str]) -> str:
    # GitHub paths are POSIX and relative to the repository root
    p = (path or "").strip().replace("\\", "/").lstrip("/")
    while p.startswith("./"):
        p = p[2:]
    if not p:
        raise ValidationError("path must be non-empty")
    return p


class RepositoryInspector:
    def __init__(self, *, broadcaster: Broadcaster, host_factory: HostFactory) -> None:
        self._broadcaster = broadcaster
        self._host_factory = host_factory

    @property
    def broadcaster(self) -> Broadcaster:
        return self._broadcaster

    async def get_repository_structure(
        self,
        token: Optional[str],
        owner: str,
        repo: str,
        include_content: bool = False,
        extensions: Iterable[str] = (),
    ) -> Dict[str, Any]:
        """Walk the repository and optionally collect matching file contents.

        Once inputs are valid, exactly one of repo_fetch_completed or
        repo_fetch_error follows repo_fetch_started, after any file events.
        """
        try:
            credential = validate_token(token)
            repo_ref = RepositoryRef(owner=(owner or "").strip(), repo=(repo or "").strip())
        except InvalidCredentialError:
            return _error(INVALID_TOKEN)
        except ValidationError as e:
            return _error(INVALID_REQUEST, str(e))

        wanted = [ext for ext in (extensions or ()) if ext]
        logger.info(
            "Fetching structure of %s (include_content=%s, extensions=%s)",
            repo_ref.full_name,
            include_content,
            wanted,
        )

        base = {"owner": repo_ref.owner, "repo": repo_ref.repo}
        self._broadcaster.emit(EventKind.REPO_FETCH_STARTED, base)

        try:
            host = self._host_factory(credential)
            structure, partial = await fetch_repository(host, repo_ref)

            files = None
            # Collection is gated on a non-empty filter list, not on the flag alone
            if include_content and wanted:
                files = tuple(await collect(host, repo_ref, structure, wanted, self._broadcaster))

            result = TraversalResult(
                repository=repo_ref,
                structure=tuple(structure),
                files=files,
                partial=partial,
            )
        except asyncio.CancelledError:
            logger.info("Structure request for %s cancelled", repo_ref.full_name)
            self._broadcaster.emit(EventKind.REPO_FETCH_ERROR, {**base, "error": CANCELLED})
            raise
        except Exception as e:
            logger.exception("Structure request for %s failed", repo_ref.full_name)
            self._broadcaster.emit(EventKind.REPO_FETCH_ERROR, {**base, "error": str(e)})
            return _error(REPOSITORY_ERROR, str(e))

        self._broadcaster.emit(
            EventKind.REPO_FETCH_COMPLETED,
            {**base, "fileCount": len(files or ())},
        )
        return result.to_dict()

    async def get_file_content(
        self,
        token: Optional[str],
        owner: str,
        repo: str,
        path: str,
    ) -> Dict[str, Any]:
        try:
            credential = validate_token(token)
            repo_ref = RepositoryRef(owner=(owner or "").strip(), repo=(repo or "").strip())
            path_clean = validate_path(path)
        except InvalidCredentialError:
            return _error(INVALID_TOKEN)
        except ValidationError as e:
            return _error(INVALID_REQUEST, str(e))

        # Callers get their own path back; only the host sees the cleaned one
        base = {"path": path, "owner": repo_ref.owner, "repo": repo_ref.repo}
        logger.info("Fetching %s from %s", path_clean, repo_ref.full_name)

        try:
            host = self._host_factory(credential)
            content = await fetch_content(host, repo_ref, path_clean, self._broadcaster)
        except Exception as e:
            logger.exception("File request for %s:%s failed", repo_ref.full_name, path_clean)
            self._broadcaster.emit(EventKind.FILE_FETCH_ERROR, {**base, "error": str(e)})
            return _error(FILE_ERROR, str(e))

        if content is None:
            self._broadcaster.emit(EventKind.FILE_FETCH_ERROR, {**base, "error": FILE_NOT_FOUND})
            return _error(FILE_NOT_FOUND)

        return {"path": path, "content": content}
