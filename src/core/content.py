"""Fetch and decode the content of a single repository file."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Optional

from core.broadcaster import Broadcaster
from core.events import EventKind
from core.interfaces import RepositoryHost
from core.models import HostEntry, RepositoryRef, SingleEntry

logger = logging.getLogger(__name__)


def decode_entry_content(entry: HostEntry) -> Optional[str]:
    """Decode the inline blob of a host entry into text.

    GitHub sends base64 wrapped at 60 columns; non-alphabet characters are
    discarded by the decoder. Bytes that are not valid UTF-8 are replaced
    rather than failing the whole file. Returns None when the entry carries
    no content (directories, or blobs too large to inline: encoding "none").
    """
    if entry.content is None:
        return None

    encoding = (entry.encoding or "base64").lower()
    if encoding == "none":
        return None
    if encoding != "base64":
        return entry.content

    try:
        raw = base64.b64decode(entry.content)
    except (binascii.Error, ValueError) as e:
        logger.warning("Could not decode content of %s: %s", entry.path, e)
        return None
    return raw.decode("utf-8", errors="replace")


async def fetch_content(
    host: RepositoryHost,
    repo_ref: RepositoryRef,
    path: str,
    broadcaster: Broadcaster,
) -> Optional[str]:
    """Return the decoded text at `path`, or None when it isn't available.

    None covers both "not a plain file" and "the host call failed"; the two
    are told apart only in the logs. Error events are left to the caller.
    """
    base = {"path": path, "owner": repo_ref.owner, "repo": repo_ref.repo}
    broadcaster.emit(EventKind.FILE_FETCH_STARTED, base)

    content: Optional[str] = None
    try:
        response = await host.get_entry(repo_ref, path)
        if isinstance(response, SingleEntry):
            content = decode_entry_content(response.entry)
        else:
            logger.debug("%s in %s is a directory, no content", path, repo_ref.full_name)
    except Exception as e:
        logger.warning("Error getting file content for %s:%s: %s", repo_ref.full_name, path, e)
        content = None

    broadcaster.emit(EventKind.FILE_FETCH_COMPLETED, {**base, "success": content is not None})
    return content
