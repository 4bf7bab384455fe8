"""Server bootstrap for the GitHub MCP service.

Creates the FastMCP instance and the long-lived event broadcaster, wires the
repository inspector into the tools, mounts the /events stream and starts
the MCP server on the configured transport.
"""

import logging
import sys
from functools import partial

from mcp.server.fastmcp import FastMCP

from clients.github_client import GitHubClient
from config import (
    EVENTS_KEEPALIVE_SECONDS,
    GITHUB_API_URL,
    GITHUB_RATE_LIMIT_MAX_SLEEP,
    GITHUB_REF,
    GITHUB_TIMEOUT,
    HTTP_VERIFY,
    LOG_LEVEL,
    MCP_TRANSPORT,
)
from core.broadcaster import Broadcaster
from core.inspector import RepositoryInspector
from core.rate_limiter import RateLimiter

from tools.file_content import register as register_file_content
from tools.repository_structure import register as register_repository_structure

from routes.events import register_event_stream

logger = logging.getLogger(__name__)

TRANSPORTS = ("stdio", "sse", "streamable-http")

mcp = FastMCP("github-mcp")
broadcaster = Broadcaster()


def configure_logging() -> None:
    # stdout carries the stdio transport, logs go to stderr
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_inspector() -> RepositoryInspector:
    rate_limiter = RateLimiter(max_sleep_seconds=GITHUB_RATE_LIMIT_MAX_SLEEP)
    host_factory = partial(
        GitHubClient,
        base_url=GITHUB_API_URL,
        timeout=GITHUB_TIMEOUT,
        verify=HTTP_VERIFY,
        ref=GITHUB_REF,
        rate_limiter=rate_limiter,
    )
    return RepositoryInspector(broadcaster=broadcaster, host_factory=host_factory)


def register_tools() -> None:
    inspector = build_inspector()

    register_repository_structure(mcp, inspector=inspector)
    register_file_content(mcp, inspector=inspector)


def register_all() -> None:
    register_tools()
    register_event_stream(mcp, broadcaster=broadcaster, keepalive_seconds=EVENTS_KEEPALIVE_SECONDS)


register_all()


def main() -> None:
    configure_logging()
    transport = MCP_TRANSPORT if MCP_TRANSPORT in TRANSPORTS else "stdio"
    if transport != MCP_TRANSPORT:
        logger.warning("Unknown MCP_TRANSPORT %r, falling back to stdio", MCP_TRANSPORT)
    logger.info("Starting github-mcp (transport=%s)", transport)
    mcp.run(transport=transport)


if __name__ == "__main__":
    main()
