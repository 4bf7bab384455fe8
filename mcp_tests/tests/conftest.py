import pytest

from core.broadcaster import Broadcaster
from core.errors import NotFoundError
from core.models import DirectoryListing, HostEntry, SingleEntry


class DummyMCP:
    """Minimal FastMCP stand-in to capture tool and route registration."""

    def __init__(self) -> None:
        self.tools = {}
        self.routes = {}

    def tool(self, *, name: str):
        def _decorator(fn):
            self.tools[name] = fn
            return fn
        return _decorator

    def custom_route(self, path: str, methods=None):
        def _decorator(fn):
            self.routes[path] = {"fn": fn, "methods": list(methods or [])}
            return fn
        return _decorator


class FakeHost:
    """In-memory RepositoryHost.

    tree maps a directory path ("" is the root) to a list of entry dicts;
    files maps a file path to its base64 content. Paths in `fail` raise.
    """

    def __init__(self, tree=None, files=None, fail=None):
        self._tree = tree or {}
        self._files = files or {}
        self._fail = dict(fail or {})
        self.calls = []

    def _entry(self, item, content=None):
        return HostEntry(
            name=item["name"],
            path=item["path"],
            kind=item.get("type", "file"),
            size=item.get("size", 0),
            download_url=item.get("download_url"),
            content=content,
            encoding="base64" if content is not None else None,
        )

    def _find(self, path):
        for items in self._tree.values():
            for item in items:
                if item["path"] == path:
                    return item
        return None

    async def list_entries(self, repo_ref, path=""):
        self.calls.append(("list", repo_ref.owner, repo_ref.repo, path))
        if path in self._fail:
            raise self._fail[path]
        if path in self._tree:
            return DirectoryListing(entries=tuple(self._entry(i) for i in self._tree[path]))
        item = self._find(path)
        if item is None:
            raise NotFoundError(f"Not found: {path}")
        return SingleEntry(entry=self._entry(item))

    async def get_entry(self, repo_ref, path):
        self.calls.append(("get", repo_ref.owner, repo_ref.repo, path))
        if path in self._fail:
            raise self._fail[path]
        if path in self._tree:
            return DirectoryListing(entries=tuple(self._entry(i) for i in self._tree[path]))
        item = self._find(path)
        if item is None:
            raise NotFoundError(f"Not found: {path}")
        return SingleEntry(entry=self._entry(item, content=self._files.get(path)))


def file_item(path, size=1):
    return {"name": path.rsplit("/", 1)[-1], "path": path, "type": "file", "size": size}


def dir_item(path):
    return {"name": path.rsplit("/", 1)[-1], "path": path, "type": "dir"}


@pytest.fixture
def dummy_mcp():
    return DummyMCP()


@pytest.fixture
def fake_host_cls():
    return FakeHost


@pytest.fixture
def items():
    # (file_item, dir_item) builders for host listings
    return file_item, dir_item


@pytest.fixture
def recorder():
    """Broadcaster with one observer that records every event it receives."""
    broadcaster = Broadcaster()
    events = []
    broadcaster.subscribe(events.append)
    return broadcaster, events
