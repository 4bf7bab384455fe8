"""Core protocol and interface definitions.

Defines the RepositoryHost protocol the traversal and content modules are
written against, plus the small callable types they accept.
"""

from __future__ import annotations

from typing import Callable, Protocol

from core.models import HostResponse, RepositoryRef


class RepositoryHost(Protocol):
    """Contract for a repository hosting API (GitHub, or a fake in tests)."""
    async def list_entries(self, repo_ref: RepositoryRef, path: str = "") -> HostResponse:
        ...

    async def get_entry(self, repo_ref: RepositoryRef, path: str) -> HostResponse:
        ...


# Builds a host bound to one request's credential
HostFactory = Callable[[str], RepositoryHost]

# Receives (path, error) for failures absorbed by best-effort operations
ErrorCallback = Callable[[str, BaseException], None]
