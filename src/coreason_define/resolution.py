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
Maps a request string and its referencing module to an absolute path.

Strategies, first success wins:

1. a core module id resolves to itself;
2. ``./`` and ``../`` requests resolve against the referencing module;
3. other requests search ancestor package directories, then global roots.

Every candidate base path is probed as an exact file, with each extension
appended, through its package manifest entry, and finally through its
directory index.
"""

from typing import TYPE_CHECKING, Callable, Iterable, Mapping, NamedTuple, Optional

from coreason_define import vpath
from coreason_define.config import DefineSettings
from coreason_define.core_registry import CoreRegistry
from coreason_define.exceptions import ModuleNotFound
from coreason_define.loaders import parse_json_file
from coreason_define.utils.logger import logger
from coreason_define.vfs import VirtualFileSystem

if TYPE_CHECKING:  # pragma: no cover
    from coreason_define.module import Module


class LookupPaths(NamedTuple):
    """Bookkeeping id of a request and the candidate directories to probe."""

    id: str
    paths: list[str]


class Resolver:
    """Resolution algorithm with its per-sandbox caches."""

    def __init__(
        self,
        fs: VirtualFileSystem,
        core: CoreRegistry,
        settings: DefineSettings,
        cwd: Callable[[], str],
        extensions: Callable[[], Iterable[str]],
    ):
        """Initializes the Resolver.

        Args:
            fs: Filesystem to probe.
            core: Registry consulted before any filesystem access.
            settings: Index names, manifest fields, package directory and global roots.
            cwd: Returns the directory used for requests without a referencing module.
            extensions: Returns the registered extensions in probe order.
        """
        self.fs = fs
        self.core = core
        self.settings = settings
        self.global_paths = list(settings.global_paths)
        self._cwd = cwd
        self._extensions = extensions
        self.path_cache: dict[tuple[str, tuple[str, ...]], str] = {}
        self.realpath_cache: dict[str, str] = {}
        self.package_main_cache: dict[str, Optional[str]] = {}

    def resolve_request(self, request: str, parent: Optional["Module"] = None) -> tuple[str, str]:
        """Resolves a request to its module id and its file.

        The id is the bookkeeping name of the module: the request resolved
        against the parent's id for relative requests, the request itself
        otherwise. Core modules map to their own id twice.

        Returns:
            tuple[str, str]: The module id and the core id or absolute file path.

        Raises:
            ModuleNotFound: If no strategy finds the module.
            ManifestParseError: If a package manifest on the way is malformed.
        """
        if self.core.exists(request):
            return request, request
        lookup = self.resolve_lookup_paths(request, parent)
        filename = self.find_path(request, lookup.paths)
        if filename is None:
            raise ModuleNotFound(request)
        return lookup.id, filename

    def resolve_filename(self, request: str, parent: Optional["Module"] = None) -> str:
        """Resolves a request to a core id or an absolute file path."""
        return self.resolve_request(request, parent)[1]

    def resolve_lookup_paths(self, request: str, parent: Optional["Module"] = None) -> LookupPaths:
        if self.core.exists(request):
            return LookupPaths(request, [])

        if not self.is_relative(request):
            if parent is not None:
                local = list(parent.paths)
            else:
                local = self.node_module_paths(self._cwd())
            return LookupPaths(request, local + self.global_paths)

        if parent is None or parent.filename is None:
            directory = self._cwd()
            return LookupPaths(vpath.resolve(directory, request), [directory])

        parent_id_path = parent.id if self._is_index(parent.filename) else vpath.dirname(parent.id)
        module_id = vpath.resolve(parent_id_path, request)
        if parent_id_path == "." and vpath.SEP not in module_id:
            module_id = "./" + module_id
        return LookupPaths(module_id, [vpath.dirname(parent.filename)])

    def find_path(self, request: str, paths: list[str]) -> Optional[str]:
        """Probes each candidate directory for the request; memoized."""
        cache_key = (request, tuple(paths))
        cached = self.path_cache.get(cache_key)
        if cached is not None:
            return cached

        if vpath.is_absolute(request):
            paths = [""]
        exts = list(self._extensions())
        trailing_slash = request.endswith(vpath.SEP)

        for candidate in paths:
            base_path = vpath.resolve(candidate, request, strict=self.settings.strict_paths)
            filename = None
            if not trailing_slash:
                filename = self.try_file(base_path) or self.try_extensions(base_path, exts)
            if not filename:
                filename = self.try_package(base_path, exts) or self.try_dir_main(base_path, exts)
            if filename:
                logger.debug(f"Resolved '{request}' to {filename}")
                self.path_cache[cache_key] = filename
                return filename
        return None

    def node_module_paths(self, directory: str) -> list[str]:
        """Package directories from ``directory`` up to the root, most specific first."""
        package_dir = self.settings.package_dir
        result = [vpath.SEP + package_dir]
        current = ""
        for item in directory.split(vpath.SEP):
            if not item:
                continue
            current += vpath.SEP + item
            if item != package_dir:
                result.append(current + vpath.SEP + package_dir)
        result.reverse()
        return result

    def try_file(self, base_path: str) -> Optional[str]:
        if not self.fs.exists(base_path) or not self.fs.stat(base_path).is_file:
            return None
        return self.fs.realpath(base_path, self.realpath_cache)

    def try_extensions(self, base_path: str, exts: list[str]) -> Optional[str]:
        for ext in exts:
            filename = self.try_file(base_path + ext)
            if filename:
                return filename
        return None

    def try_dir_main(self, base_path: str, exts: list[str]) -> Optional[str]:
        for name in self.settings.dir_main:
            filename = self.try_extensions(vpath.resolve(base_path, name), exts)
            if filename:
                return filename
        return None

    def try_package(self, request_path: str, exts: list[str]) -> Optional[str]:
        main = self.read_package(request_path)
        if not main:
            return None
        filename = vpath.resolve(request_path, main)
        return self.try_file(filename) or self.try_extensions(filename, exts) or self.try_dir_main(filename, exts)

    def read_package(self, request_path: str) -> Optional[str]:
        """Returns the entry field of the manifest in a directory, if any."""
        if request_path in self.package_main_cache:
            return self.package_main_cache[request_path]
        manifest = vpath.resolve(request_path, self.settings.manifest_name)
        if not self.fs.exists(manifest) or not self.fs.stat(manifest).is_file:
            return None
        main = self._package_main(parse_json_file(self.fs, manifest))
        self.package_main_cache[request_path] = main
        return main

    def clear(self) -> None:
        self.path_cache.clear()
        self.realpath_cache.clear()
        self.package_main_cache.clear()

    @staticmethod
    def is_relative(request: str) -> bool:
        return request in (".", "..") or request.startswith(("./", "../"))

    def _is_index(self, filename: str) -> bool:
        try:
            name = vpath.basename(filename)
        except ValueError:
            return False
        ext = vpath.extname(name)
        return bool(ext) and name[: -len(ext)] in self.settings.dir_main

    def _package_main(self, data: object) -> Optional[str]:
        if not isinstance(data, Mapping):
            return None
        for field in self.settings.package_main:
            value = data.get(field)
            if value and isinstance(value, str):
                return value
        return None
