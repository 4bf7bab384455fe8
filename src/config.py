"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
project-level configuration constants used across the codebase (GitHub API
endpoint and timeouts, event stream keep-alive, transport and log level).
"""

from __future__ import annotations

import os
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def _env_str(name: str, default: Optional[str]) -> Optional[str]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


# GitHub
GITHUB_API_URL = (_env_str("GITHUB_API_URL", "https://api.github.com") or "").rstrip("/")
GITHUB_TIMEOUT = _env_float("GITHUB_TIMEOUT", 20.0)
GITHUB_RATE_LIMIT_MAX_SLEEP = _env_int("GITHUB_RATE_LIMIT_MAX_SLEEP", 60)
# None means "repository default branch"
GITHUB_REF = _env_str("GITHUB_REF", None)

# Network / HTTP
HTTP_VERIFY = _env_bool("HTTP_VERIFY", True)

# Event stream
EVENTS_KEEPALIVE_SECONDS = _env_float("EVENTS_KEEPALIVE_SECONDS", 30.0)

# Server
MCP_TRANSPORT = _env_str("MCP_TRANSPORT", "stdio") or "stdio"
LOG_LEVEL = (_env_str("LOG_LEVEL", "INFO") or "INFO").upper()
