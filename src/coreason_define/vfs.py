# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_define

"""
In-memory filesystem backing a sandbox.

A file may hold any value: source text, bytes, a structured value or a
callable module body. Exposed to modules as the core module ``fs``.
"""

from itertools import chain
from typing import Any, Callable, Mapping, Optional, Protocol, Union, runtime_checkable

from coreason_define import vpath
from coreason_define.exceptions import FileNotFound, IllegalDirectoryOperation
from coreason_define.models import AsyncFileInfo, FileStat
from coreason_define.scheduler import TickScheduler
from coreason_define.utils.logger import logger

ProviderResult = Union[AsyncFileInfo, Mapping[str, Any], BaseException, None]


@runtime_checkable
class AsyncProvider(Protocol):
    """
    Protocol for an asynchronous content source consulted on a filesystem miss.

    ``resolve`` either returns a result immediately or returns None and later
    invokes ``callback(result)``. A result is an ``AsyncFileInfo`` (or a
    mapping with the same fields), or an exception to report a failure.
    Providers may also implement ``resolve_module(request, module, callback)``
    and ``destroy()``.
    """

    def resolve(self, path: str, callback: Callable[[ProviderResult], None]) -> ProviderResult:
        """
        Look up a path that is absent from the synchronous maps.
        """
        ...


def coerce_info(result: ProviderResult) -> Union[AsyncFileInfo, BaseException, None]:
    """Normalizes a provider result to an ``AsyncFileInfo`` or an exception."""
    if result is None or isinstance(result, (AsyncFileInfo, BaseException)):
        return result
    return AsyncFileInfo.model_validate(dict(result))


class VirtualFileSystem:
    """Maps of file path to content and of directory paths, keyed by absolute path."""

    def __init__(
        self,
        scheduler: TickScheduler,
        cwd: Callable[[], str] = lambda: vpath.SEP,
        strict: bool = False,
        ensure_alive: Callable[[], None] = lambda: None,
    ):
        """Initializes an empty filesystem holding only the root directory.

        Args:
            scheduler: Queue that runs asynchronous continuations.
            cwd: Returns the current directory used to absolutize relative paths.
            strict: Reject paths that climb above the root.
            ensure_alive: Raises once the owning sandbox is destroyed.
        """
        self.files: dict[str, Any] = {}
        self.dirs: set[str] = {vpath.SEP}
        self.scheduler = scheduler
        self._cwd = cwd
        self._strict = strict
        self._async_provider: Optional[AsyncProvider] = None
        self.ensure_alive = ensure_alive
        self.destroyed = False

    @property
    def async_provider(self) -> Optional[AsyncProvider]:
        return self._async_provider

    @async_provider.setter
    def async_provider(self, provider: Optional[AsyncProvider]) -> None:
        self.ensure_alive()
        self._async_provider = provider

    def absolute(self, path: str) -> str:
        """Resolves ``path`` against the current directory and normalizes it."""
        return vpath.resolve(self._cwd(), path, strict=self._strict)

    # -- synchronous API --------------------------------------------------

    def write_file(self, path: str, content: Any) -> None:
        """Stores content at a path and creates every missing ancestor directory.

        Args:
            path: Destination path, absolute or relative to the current directory.
            content: Any value.

        Raises:
            IllegalDirectoryOperation: If the path is a directory or an ancestor is a file.
        """
        self.ensure_alive()
        path = self.absolute(path)
        if path in self.dirs:
            raise IllegalDirectoryOperation(path)
        ancestors = self._ancestors(path)
        self._check_ancestors(ancestors)
        self.files[path] = content
        self.dirs.update(ancestors)

    def mkdir(self, path: str) -> None:
        """Creates a directory along with its ancestors.

        Raises:
            IllegalDirectoryOperation: If the path or an ancestor is a file.
        """
        self.ensure_alive()
        path = self.absolute(path)
        if path in self.files:
            raise IllegalDirectoryOperation(path, "file already exists")
        ancestors = self._ancestors(path)
        self._check_ancestors(ancestors)
        self.dirs.update(ancestors)
        self.dirs.add(path)

    def read_file(self, path: str) -> Any:
        """Returns the content stored at a path.

        Raises:
            FileNotFound: If nothing exists at the path.
            IllegalDirectoryOperation: If the path is a directory.
        """
        self.ensure_alive()
        path = self.absolute(path)
        if path in self.files:
            return self.files[path]
        if path in self.dirs:
            raise IllegalDirectoryOperation(path)
        raise FileNotFound(path)

    def stat(self, path: str) -> FileStat:
        self.ensure_alive()
        path = self.absolute(path)
        if path in self.files:
            return FileStat(is_file=True)
        if path in self.dirs:
            return FileStat(is_file=False)
        raise FileNotFound(path)

    def exists(self, path: str) -> bool:
        self.ensure_alive()
        path = self.absolute(path)
        return path in self.files or path in self.dirs

    def realpath(self, path: str, cache: Optional[dict[str, str]] = None) -> str:
        """Validates that a path exists and returns its normalized form.

        Args:
            path: The path to check.
            cache: Optional memo shared across one resolution pass.

        Raises:
            FileNotFound: If nothing exists at the path.
        """
        self.ensure_alive()
        path = self.absolute(path)
        if cache is not None and path in cache:
            return cache[path]
        if not self.exists(path):
            raise FileNotFound(path)
        if cache is not None:
            cache[path] = path
        return path

    def readdir(self, path: str) -> list[str]:
        """Lists the immediate children of a directory (files and directories).

        Raises:
            FileNotFound: If the directory does not exist.
            IllegalDirectoryOperation: If the path is a file.
        """
        self.ensure_alive()
        path = self.absolute(path)
        if path in self.files:
            raise IllegalDirectoryOperation(path, "not a directory")
        if path not in self.dirs:
            raise FileNotFound(path)
        prefix = path if path == vpath.SEP else path + vpath.SEP
        names = {
            entry[len(prefix) :].split(vpath.SEP, 1)[0]
            for entry in chain(self.files, self.dirs)
            if entry != path and entry.startswith(prefix)
        }
        return sorted(names)

    def clear(self) -> None:
        """Drops every file and directory except the root."""
        self.files = {}
        self.dirs = {vpath.SEP}

    def destroy(self) -> None:
        self.destroyed = True
        provider = self._async_provider
        self._async_provider = None
        if provider is not None:
            destroy = getattr(provider, "destroy", None)
            if callable(destroy):
                destroy()
        self.clear()

    # -- asynchronous API -------------------------------------------------

    def exists_async(self, path: str, callback: Callable[[bool], Any]) -> None:
        """Reports existence to ``callback(found)`` after the current turn."""
        self.ensure_alive()
        path = self.absolute(path)
        if path in self.files or path in self.dirs:
            return self._tick(callback, True)
        if self._async_provider is None:
            return self._tick(callback, False)

        def handle(info: Union[AsyncFileInfo, BaseException, None]) -> None:
            if isinstance(info, BaseException):
                logger.warning(f"Async provider failed for {path}: {info}")
                self._tick(callback, False)
            else:
                self._tick(callback, info is not None and info.found)

        self._ask_provider(path, handle)

    def stat_async(self, path: str, callback: Callable[[Optional[BaseException], Optional[FileStat]], Any]) -> None:
        """Reports ``callback(error, stat)`` after the current turn."""
        self.ensure_alive()
        path = self.absolute(path)
        if path in self.files:
            return self._tick(callback, None, FileStat(is_file=True))
        if path in self.dirs:
            return self._tick(callback, None, FileStat(is_file=False))
        if self._async_provider is None:
            return self._tick(callback, FileNotFound(path), None)

        def handle(info: Union[AsyncFileInfo, BaseException, None]) -> None:
            if isinstance(info, BaseException):
                self._tick(callback, info, None)
            elif info is not None and info.found:
                self._tick(callback, None, FileStat(is_file=info.is_file))
            else:
                self._tick(callback, FileNotFound(path), None)

        self._ask_provider(path, handle)

    def read_file_async(self, path: str, callback: Callable[[Optional[BaseException], Any], Any]) -> None:
        """Reports ``callback(error, content)`` after the current turn."""
        self.ensure_alive()
        path = self.absolute(path)
        if path in self.files:
            return self._tick(callback, None, self.files[path])
        if path in self.dirs:
            return self._tick(callback, IllegalDirectoryOperation(path), None)
        if self._async_provider is None:
            return self._tick(callback, FileNotFound(path), None)

        def handle(info: Union[AsyncFileInfo, BaseException, None]) -> None:
            if isinstance(info, BaseException):
                self._tick(callback, info, None)
            elif info is None or not info.found:
                self._tick(callback, FileNotFound(path), None)
            elif not info.is_file:
                self._tick(callback, IllegalDirectoryOperation(path), None)
            elif info.has_content:
                self._tick(callback, None, info.content)
            elif info.real_path in self.files:
                self._tick(callback, None, self.files[info.real_path])
            else:
                self._tick(callback, FileNotFound(path), None)

        self._ask_provider(path, handle)

    def readdir_async(self, path: str, callback: Callable[[Optional[BaseException], Optional[list[str]]], Any]) -> None:
        """Reports ``callback(error, names)`` after the current turn."""
        self.ensure_alive()
        try:
            names = self.readdir(path)
        except (FileNotFound, IllegalDirectoryOperation) as e:
            return self._tick(callback, e, None)
        self._tick(callback, None, names)

    # -- internals --------------------------------------------------------

    def _tick(self, callback: Callable[..., Any], *args: Any) -> None:
        self.scheduler.call_soon(callback, *args)

    def _ask_provider(self, path: str, handle: Callable[[Union[AsyncFileInfo, BaseException, None]], None]) -> None:
        provider = self._async_provider
        assert provider is not None

        def continuation(result: ProviderResult) -> None:
            if self.destroyed:
                logger.debug(f"Dropping async provider result for {path}: filesystem destroyed")
                return
            handle(self.cache_async(result))

        try:
            immediate = provider.resolve(path, continuation)
        except Exception as e:
            logger.debug(f"Async provider raised for {path}: {e}")
            immediate = e
        if immediate is not None:
            continuation(immediate)

    def cache_async(self, result: ProviderResult) -> Union[AsyncFileInfo, BaseException, None]:
        """Copies a cacheable provider result into the synchronous maps."""
        info = coerce_info(result)
        if isinstance(info, AsyncFileInfo) and info.found and info.cacheable:
            assert info.real_path is not None
            if not info.is_file:
                self.mkdir(info.real_path)
            elif info.has_content:
                self.write_file(info.real_path, info.content)
        return info

    def _check_ancestors(self, ancestors: list[str]) -> None:
        for ancestor in ancestors:
            if ancestor in self.files:
                raise IllegalDirectoryOperation(ancestor, "not a directory")

    @staticmethod
    def _ancestors(path: str) -> list[str]:
        result: list[str] = []
        current = ""
        for item in path.split(vpath.SEP)[1:-1]:
            current += vpath.SEP + item
            result.append(current)
        return result
