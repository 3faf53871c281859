# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_define

from typing import Any, Callable

import pytest
from coreason_define.exceptions import FileNotFound, IllegalDirectoryOperation
from coreason_define.models import AsyncFileInfo
from coreason_define.scheduler import TickScheduler
from coreason_define.vfs import AsyncProvider, VirtualFileSystem


class DictProvider:
    """Async provider answering from a dict of path -> result."""

    def __init__(self, entries: dict[str, Any] | None = None, immediate: bool = True):
        self.entries = entries or {}
        self.immediate = immediate
        self.pending: list[tuple[Callable[[Any], None], Any]] = []
        self.destroyed = False
        self.requests: list[str] = []

    def resolve(self, path: str, callback: Callable[[Any], None]) -> Any:
        self.requests.append(path)
        info = self.entries.get(path, {"real_path": None})
        if self.immediate:
            return info
        self.pending.append((callback, info))
        return None

    def flush(self) -> None:
        pending, self.pending = self.pending, []
        for callback, info in pending:
            callback(info)

    def destroy(self) -> None:
        self.destroyed = True


def test_write_creates_ancestors(vfs: VirtualFileSystem) -> None:
    vfs.write_file("/a/b/c.txt", "hello")

    assert vfs.read_file("/a/b/c.txt") == "hello"
    assert vfs.exists("/a")
    assert vfs.stat("/a/b").is_directory
    assert vfs.stat("/a/b/c.txt").is_file


def test_content_is_stored_as_is(vfs: VirtualFileSystem) -> None:
    body = object()
    vfs.write_file("/m.js", body)
    assert vfs.read_file("/m.js") is body


def test_write_over_directory_raises(vfs: VirtualFileSystem) -> None:
    vfs.mkdir("/a/b")
    with pytest.raises(IllegalDirectoryOperation) as excinfo:
        vfs.write_file("/a/b", "x")
    assert excinfo.value.path == "/a/b"
    assert "EISDIR" in str(excinfo.value)


def test_write_below_file_raises(vfs: VirtualFileSystem) -> None:
    vfs.write_file("/a", "x")
    with pytest.raises(IllegalDirectoryOperation):
        vfs.write_file("/a/b.js", "y")
    with pytest.raises(IllegalDirectoryOperation):
        vfs.mkdir("/a")


def test_read_missing_raises(vfs: VirtualFileSystem) -> None:
    with pytest.raises(FileNotFound) as excinfo:
        vfs.read_file("/nope")
    assert isinstance(excinfo.value, FileNotFoundError)
    assert excinfo.value.path == "/nope"


def test_read_directory_raises(vfs: VirtualFileSystem) -> None:
    vfs.mkdir("/dir")
    with pytest.raises(IllegalDirectoryOperation):
        vfs.read_file("/dir")


def test_stat_missing_raises(vfs: VirtualFileSystem) -> None:
    with pytest.raises(FileNotFound):
        vfs.stat("/nope")


def test_relative_paths_use_current_directory(scheduler: TickScheduler) -> None:
    fs = VirtualFileSystem(scheduler, cwd=lambda: "/app")
    fs.write_file("x.js", 1)
    fs.write_file("../top.js", 2)

    assert fs.files == {"/app/x.js": 1, "/top.js": 2}
    assert fs.read_file("./x.js") == 1


def test_readdir_lists_immediate_children(vfs: VirtualFileSystem) -> None:
    vfs.write_file("/a/b/c.txt", 1)
    vfs.write_file("/a/d.txt", 2)
    vfs.mkdir("/a/e")

    assert vfs.readdir("/a") == ["b", "d.txt", "e"]
    assert vfs.readdir("/") == ["a"]
    assert vfs.readdir("/a/e") == []


def test_readdir_errors(vfs: VirtualFileSystem) -> None:
    vfs.write_file("/f.txt", 1)
    with pytest.raises(FileNotFound):
        vfs.readdir("/missing")
    with pytest.raises(IllegalDirectoryOperation):
        vfs.readdir("/f.txt")


def test_realpath_uses_cache(vfs: VirtualFileSystem) -> None:
    vfs.write_file("/a/b.js", 1)
    cache: dict[str, str] = {}

    assert vfs.realpath("/a/./b.js", cache) == "/a/b.js"
    assert cache == {"/a/b.js": "/a/b.js"}
    with pytest.raises(FileNotFound):
        vfs.realpath("/a/c.js", cache)


def test_clear_keeps_root(vfs: VirtualFileSystem) -> None:
    vfs.write_file("/a/b.js", 1)
    vfs.clear()
    assert vfs.files == {}
    assert vfs.dirs == {"/"}


def test_async_callbacks_never_run_synchronously(vfs: VirtualFileSystem, scheduler: TickScheduler) -> None:
    vfs.write_file("/a", 1)
    results: list[Any] = []

    vfs.exists_async("/a", lambda found: results.append(("a", found)))
    vfs.exists_async("/missing", lambda found: results.append(("missing", found)))
    vfs.read_file_async("/a", lambda error, content: results.append(("read", error, content)))
    assert results == []

    assert scheduler.run_pending() == 3
    assert results == [("a", True), ("missing", False), ("read", None, 1)]


def test_async_errors_without_provider(vfs: VirtualFileSystem, scheduler: TickScheduler) -> None:
    vfs.mkdir("/dir")
    results: list[Any] = []

    vfs.read_file_async("/nope", lambda error, content: results.append(error))
    vfs.read_file_async("/dir", lambda error, content: results.append(error))
    vfs.stat_async("/nope", lambda error, stat: results.append(error))
    vfs.readdir_async("/nope", lambda error, names: results.append(error))
    scheduler.run_pending()

    assert isinstance(results[0], FileNotFound)
    assert isinstance(results[1], IllegalDirectoryOperation)
    assert isinstance(results[2], FileNotFound)
    assert isinstance(results[3], FileNotFound)


def test_readdir_async(vfs: VirtualFileSystem, scheduler: TickScheduler) -> None:
    vfs.write_file("/a/x.js", 1)
    results: list[Any] = []
    vfs.readdir_async("/a", lambda error, names: results.append((error, names)))
    scheduler.run_pending()
    assert results == [(None, ["x.js"])]


def test_provider_satisfies_protocol() -> None:
    assert isinstance(DictProvider(), AsyncProvider)


def test_provider_result_is_cached(vfs: VirtualFileSystem, scheduler: TickScheduler) -> None:
    provider = DictProvider(
        {"/remote/a.txt": {"real_path": "/remote/a.txt", "is_file": True, "cacheable": True, "content": "data"}}
    )
    vfs.async_provider = provider
    results: list[Any] = []

    vfs.read_file_async("/remote/a.txt", lambda error, content: results.append((error, content)))
    scheduler.run_pending()

    assert results == [(None, "data")]
    assert vfs.read_file("/remote/a.txt") == "data"

    # Served from the synchronous maps from now on.
    vfs.exists_async("/remote/a.txt", lambda found: results.append(found))
    scheduler.run_pending()
    assert results[-1] is True
    assert provider.requests == ["/remote/a.txt"]


def test_non_cacheable_result_is_not_stored(vfs: VirtualFileSystem, scheduler: TickScheduler) -> None:
    vfs.async_provider = DictProvider(
        {"/r.txt": AsyncFileInfo(real_path="/r.txt", is_file=True, cacheable=False, content="once")}
    )
    results: list[Any] = []

    vfs.read_file_async("/r.txt", lambda error, content: results.append((error, content)))
    scheduler.run_pending()

    assert results == [(None, "once")]
    assert not vfs.exists("/r.txt")


def test_provider_directory_result_creates_directory(vfs: VirtualFileSystem, scheduler: TickScheduler) -> None:
    vfs.async_provider = DictProvider({"/pkg": {"real_path": "/pkg", "is_file": False, "cacheable": True}})
    results: list[Any] = []

    vfs.stat_async("/pkg", lambda error, stat: results.append((error, stat)))
    scheduler.run_pending()

    error, stat = results[0]
    assert error is None
    assert stat.is_directory
    assert "/pkg" in vfs.dirs


def test_provider_miss_reports_not_found(vfs: VirtualFileSystem, scheduler: TickScheduler) -> None:
    vfs.async_provider = DictProvider()
    results: list[Any] = []

    vfs.exists_async("/none", lambda found: results.append(found))
    vfs.read_file_async("/none", lambda error, content: results.append(error))
    scheduler.run_pending()

    assert results[0] is False
    assert isinstance(results[1], FileNotFound)


def test_provider_error_is_forwarded(vfs: VirtualFileSystem, scheduler: TickScheduler) -> None:
    failure = ConnectionError("backend unavailable")
    vfs.async_provider = DictProvider({"/x": failure})
    results: list[Any] = []

    vfs.read_file_async("/x", lambda error, content: results.append(error))
    vfs.exists_async("/x", lambda found: results.append(found))
    scheduler.run_pending()

    assert results == [failure, False]


def test_provider_exception_is_forwarded(vfs: VirtualFileSystem, scheduler: TickScheduler) -> None:
    class Exploding:
        def resolve(self, path: str, callback: Any) -> Any:
            raise RuntimeError("boom")

    vfs.async_provider = Exploding()
    results: list[Any] = []
    vfs.stat_async("/x", lambda error, stat: results.append(error))
    scheduler.run_pending()

    assert isinstance(results[0], RuntimeError)


def test_deferred_provider(vfs: VirtualFileSystem, scheduler: TickScheduler) -> None:
    provider = DictProvider(
        {"/late.txt": {"real_path": "/late.txt", "is_file": True, "cacheable": True, "content": "late"}},
        immediate=False,
    )
    vfs.async_provider = provider
    results: list[Any] = []

    vfs.read_file_async("/late.txt", lambda error, content: results.append(content))
    assert scheduler.run_pending() == 0
    assert results == []

    provider.flush()
    assert results == []
    scheduler.run_pending()
    assert results == ["late"]


def test_destroy_notifies_provider(vfs: VirtualFileSystem) -> None:
    provider = DictProvider()
    vfs.async_provider = provider
    vfs.write_file("/a.js", 1)

    vfs.destroy()

    assert provider.destroyed
    assert vfs.async_provider is None
    assert vfs.files == {}
