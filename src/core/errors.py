from __future__ import annotations


class GitHubMCPError(Exception):
    """Base error for the GitHub MCP server."""


class ValidationError(GitHubMCPError):
    """Raised when user input is invalid."""


class InvalidCredentialError(ValidationError):
    """Raised when the GitHub token is missing, empty or rejected by GitHub."""


class ExternalServiceError(GitHubMCPError):
    """Raised when a call to GitHub fails."""


class NotFoundError(GitHubMCPError):
    """Raised when a requested repository path does not exist."""
