"""Immutable dataclasses for repository data flowing through the server.

Covers three groups:
- host responses (HostEntry wrapped in DirectoryListing or SingleEntry),
- traversal output (FileNode / DirectoryNode trees, ContentRecord),
- the final TraversalResult returned by the repository structure tool.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from core.errors import ValidationError


EntryKind = Literal["file", "dir", "symlink", "submodule"]


@dataclass(frozen=True)
class RepositoryRef:
    owner: str
    repo: str

    def __post_init__(self) -> None:
        if not (self.owner or "").strip():
            raise ValidationError("owner must be non-empty")
        if not (self.repo or "").strip():
            raise ValidationError("repo must be non-empty")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


# --- Host responses ---


@dataclass(frozen=True)
class HostEntry:
    """One item as described by the repository host.

    `content` is the raw encoded blob (base64 for GitHub) and is only
    present when the host inlined it, i.e. for a single file lookup.
    """

    name: str
    path: str
    kind: EntryKind
    size: int = 0
    download_url: Optional[str] = None
    content: Optional[str] = None
    encoding: Optional[str] = None


@dataclass(frozen=True)
class DirectoryListing:
    entries: Tuple[HostEntry, ...] = ()


@dataclass(frozen=True)
class SingleEntry:
    entry: HostEntry


HostResponse = Union[DirectoryListing, SingleEntry]


# --- Traversal output ---


@dataclass(frozen=True)
class FileNode:
    name: str
    path: str
    size: int = 0
    download_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "type": "file",
            "size": self.size,
            "download_url": self.download_url,
        }


@dataclass(frozen=True)
class DirectoryNode:
    name: str
    path: str
    children: Tuple["TreeNode", ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "type": "directory",
            "children": [child.to_dict() for child in self.children],
        }


TreeNode = Union[FileNode, DirectoryNode]


@dataclass(frozen=True)
class ContentRecord:
    # content is None when retrieval failed or the path was not a plain file
    path: str
    content: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "content": self.content}


@dataclass(frozen=True)
class TraversalResult:
    """Response model for the repository structure tool.

    `files` stays None unless content collection ran. `partial` is set when
    at least one host failure was absorbed while walking the tree.
    """

    repository: RepositoryRef
    structure: Tuple[TreeNode, ...] = ()
    files: Optional[Tuple[ContentRecord, ...]] = None
    partial: bool = False

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "repository": {
                "owner": self.repository.owner,
                "repo": self.repository.repo,
                "structure": [node.to_dict() for node in self.structure],
            }
        }
        if self.files is not None:
            out["files"] = [record.to_dict() for record in self.files]
        if self.partial:
            out["partial"] = True
        return out


@dataclass
class FailureLog:
    # Collects (path, error) pairs reported by best-effort operations
    failures: List[Tuple[str, str]] = field(default_factory=list)

    def __call__(self, path: str, err: BaseException) -> None:
        self.failures.append((path, str(err)))

    def __bool__(self) -> bool:
        return bool(self.failures)
