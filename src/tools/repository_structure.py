"""MCP tool that returns the directory tree of a GitHub repository.

Registers 'get_repository_structure', which delegates to the injected
RepositoryInspector and returns its payload as JSON text.
"""

from __future__ import annotations

import json
from typing import List, Optional

from mcp.server.fastmcp import FastMCP

from core.inspector import RepositoryInspector


def register(mcp: FastMCP, *, inspector: RepositoryInspector) -> None:
    @mcp.tool(name="get_repository_structure")
    async def get_repository_structure(
        token: str,
        owner: str,
        repo: str,
        include_content: bool = False,
        extensions: Optional[List[str]] = None,
    ) -> str:
        """Fetch the full directory tree of a GitHub repository.

        Walks the repository recursively and, on request, also returns the
        content of files whose extension is listed.

        Params:
          - token: GitHub token used for this request only (required).
          - owner: repository owner, user or organization (required).
          - repo: repository name (required).
          - include_content: also fetch file contents (default: False).
          - extensions: extensions to fetch content for, e.g. ["md", "py"];
            "*" selects every file. Content is only fetched when this list is
            non-empty.

        Returns:
          JSON text: {"repository": {"owner", "repo", "structure"}, "files"?}
          on success, or {"error", "details"?} when the request failed.
        """
        payload = await inspector.get_repository_structure(
            token,
            owner,
            repo,
            include_content=include_content,
            extensions=list(extensions or []),
        )
        return json.dumps(payload)
