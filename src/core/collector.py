"""Collect file contents for the parts of a tree matching extension filters.

Files are matched on the lowercased suffix after the last '.' of their name;
the wildcard filter '*' matches every file, including files without an
extension.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, List, Optional, Sequence

from core.broadcaster import Broadcaster
from core.content import fetch_content
from core.events import EventKind
from core.interfaces import RepositoryHost
from core.models import ContentRecord, DirectoryNode, FileNode, RepositoryRef, TreeNode

WILDCARD = "*"


def file_extension(name: str) -> Optional[str]:
    if "." not in (name or ""):
        return None
    return name.rsplit(".", 1)[1].lower()


def normalize_extensions(extensions: Iterable[str]) -> FrozenSet[str]:
    # ".md", "MD" and "md" all select the same files
    out = set()
    for ext in extensions or ():
        e = (ext or "").strip().lower()
        if e != WILDCARD:
            e = e.lstrip(".")
        if e:
            out.add(e)
    return frozenset(out)


def matches(node: FileNode, extensions: FrozenSet[str]) -> bool:
    if WILDCARD in extensions:
        return True
    ext = file_extension(node.name)
    return ext is not None and ext in extensions


async def collect(
    host: RepositoryHost,
    repo_ref: RepositoryRef,
    tree: Sequence[TreeNode],
    extensions: Iterable[str],
    broadcaster: Broadcaster,
) -> List[ContentRecord]:
    """Fetch every matching file depth-first; one record per match."""
    wanted = normalize_extensions(extensions)
    records: List[ContentRecord] = []

    async def _walk(nodes: Sequence[TreeNode]) -> None:
        for node in nodes:
            if isinstance(node, DirectoryNode):
                await _walk(node.children)
                continue
            if not matches(node, wanted):
                continue

            broadcaster.emit(EventKind.FILE_FETCH_STARTED, {"path": node.path})
            content = await fetch_content(host, repo_ref, node.path, broadcaster)
            broadcaster.emit(
                EventKind.FILE_FETCH_COMPLETED,
                {"path": node.path, "success": content is not None},
            )
            records.append(ContentRecord(path=node.path, content=content))

    await _walk(tree)
    return records
