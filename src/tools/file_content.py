"""MCP tool that returns the decoded content of one repository file."""

from __future__ import annotations

import json

from mcp.server.fastmcp import FastMCP

from core.inspector import RepositoryInspector


def register(mcp: FastMCP, *, inspector: RepositoryInspector) -> None:
    @mcp.tool(name="get_file_content")
    async def get_file_content(token: str, owner: str, repo: str, path: str) -> str:
        """Read a file from a GitHub repository and return it as text.

        Params:
          - token: GitHub token used for this request only (required).
          - owner: repository owner (required).
          - repo: repository name (required).
          - path: file path relative to the repository root (required).

        Returns:
          JSON text: {"path", "content"} on success, or {"error", "details"?}
          when the path is missing, is a directory, or could not be read.
        """
        payload = await inspector.get_file_content(token, owner, repo, path)
        return json.dumps(payload)
