"""Recursive walk of a repository tree through a RepositoryHost.

`traverse` is best effort: a host failure at any level is logged, reported to
the optional `on_error` callback and turns that level into an empty list, so
one bad directory truncates its own branch without aborting the walk.
Task cancellation is a BaseException and is never absorbed here.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from core.interfaces import ErrorCallback, RepositoryHost
from core.models import (
    DirectoryNode,
    FailureLog,
    FileNode,
    HostEntry,
    RepositoryRef,
    SingleEntry,
    TreeNode,
)

logger = logging.getLogger(__name__)


def _file_node(entry: HostEntry) -> FileNode:
    return FileNode(
        name=entry.name,
        path=entry.path,
        size=max(0, int(entry.size or 0)),
        download_url=entry.download_url,
    )


async def traverse(
    host: RepositoryHost,
    repo_ref: RepositoryRef,
    path: str = "",
    *,
    on_error: Optional[ErrorCallback] = None,
) -> List[TreeNode]:
    """Return the tree below `path` (repository root by default)."""
    try:
        response = await host.list_entries(repo_ref, path)
    except Exception as e:
        logger.warning(
            "Error getting repository structure for %s at '%s': %s",
            repo_ref.full_name,
            path,
            e,
        )
        if on_error is not None:
            on_error(path, e)
        return []

    if isinstance(response, SingleEntry):
        # The path named a file rather than a directory
        return [_file_node(response.entry)]

    items: List[TreeNode] = []
    for entry in response.entries:
        if entry.kind == "dir":
            children = await traverse(host, repo_ref, entry.path, on_error=on_error)
            items.append(DirectoryNode(name=entry.name, path=entry.path, children=tuple(children)))
        elif entry.kind == "file":
            items.append(_file_node(entry))
        else:
            logger.debug("Skipping %s entry %s", entry.kind, entry.path)
    return items


def iter_files(nodes: Iterable[TreeNode]) -> Iterator[FileNode]:
    """Yield file nodes depth-first in structure order."""
    for node in nodes:
        if isinstance(node, DirectoryNode):
            yield from iter_files(node.children)
        else:
            yield node


def count_files(nodes: Iterable[TreeNode]) -> int:
    return sum(1 for _ in iter_files(nodes))


async def fetch_repository(
    host: RepositoryHost,
    repo_ref: RepositoryRef,
    *,
    on_error: Optional[ErrorCallback] = None,
) -> Tuple[List[TreeNode], bool]:
    """Walk the whole repository from its root.

    Returns (structure, partial) where `partial` tells whether any subtree
    was dropped because of a host failure. Progress events are left to the
    caller, which also knows when content collection is over.
    """
    failures = FailureLog()

    def _record(path: str, err: BaseException) -> None:
        failures(path, err)
        if on_error is not None:
            on_error(path, err)

    structure = await traverse(host, repo_ref, "", on_error=_record)

    if failures:
        logger.info(
            "Traversal of %s skipped %d subtree(s) after host errors",
            repo_ref.full_name,
            len(failures.failures),
        )
    return structure, bool(failures)
