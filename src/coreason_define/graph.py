# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_define

from typing import Any, Callable, Optional

from coreason_define import vpath
from coreason_define.core_registry import CoreRegistry
from coreason_define.exceptions import AsyncNotCacheable, ModuleNotFound
from coreason_define.executor import ModuleExecutor
from coreason_define.loaders import Loader, load_source
from coreason_define.models import AsyncFileInfo
from coreason_define.module import Module
from coreason_define.resolution import Resolver
from coreason_define.scheduler import TickScheduler
from coreason_define.utils.logger import logger
from coreason_define.vfs import ProviderResult, VirtualFileSystem, coerce_info

AsyncCallback = Callable[[Optional[BaseException], Any], Any]


class ModuleGraph:
    """Cache of loaded modules for one sandbox.

    The cache is the single source of truth for whether a path is loading or
    loaded. A module enters the cache before its content runs, so a dependency
    that requires it back mid-load receives the partially populated exports
    instead of running it again.
    """

    def __init__(
        self,
        fs: VirtualFileSystem,
        core: CoreRegistry,
        resolver: Resolver,
        executor: ModuleExecutor,
        loaders: dict[str, Loader],
        scheduler: TickScheduler,
        default_extension: str = ".js",
        ensure_alive: Callable[[], None] = lambda: None,
    ):
        """Initializes the ModuleGraph.

        Args:
            fs: Filesystem holding module content.
            core: Registry of built-in modules.
            resolver: Resolution algorithm bound to the same filesystem.
            executor: Runs module bodies.
            loaders: Extension table, shared with the resolver's probe list.
            scheduler: Queue for asynchronous continuations.
            default_extension: Loader used for files without a known extension.
            ensure_alive: Raises once the owning sandbox is destroyed.
        """
        self.fs = fs
        self.core = core
        self.resolver = resolver
        self.executor = executor
        self.loaders = loaders
        self.scheduler = scheduler
        self.default_extension = default_extension
        self.ensure_alive = ensure_alive
        self.cache: dict[str, Module] = {}
        self.main_module: Optional[Module] = None

    def load(self, request: str, parent: Optional[Module] = None, is_main: bool = False) -> Any:
        """Resolves, loads and caches a module; returns its exports.

        Args:
            request: The string passed to ``require``.
            parent: The requesting module, or None for the entry request.
            is_main: Record the module as the entry module (id ``"."``).

        Returns:
            Any: The module exports, possibly partial if the module is still loading.

        Raises:
            ModuleNotFound: If the request cannot be resolved.
            SandboxDestroyed: If the owning sandbox is destroyed.
        """
        self.ensure_alive()
        module_id, filename = self.resolver.resolve_request(request, parent)
        if self.core.exists(filename):
            return self.core.require(filename)

        cached = self.cache.get(filename)
        if cached is not None:
            return cached.exports

        module = Module(module_id, parent, self)
        if is_main:
            module.id = "."
            self.main_module = module
        self.cache[filename] = module

        logger.debug(f"Loading module {filename}")
        try:
            module.load(filename)
        except Exception:
            if self.cache.get(filename) is module:
                del self.cache[filename]
            raise
        return module.exports

    def get_module(self, request: str, parent: Optional[Module] = None) -> Optional[Module]:
        """Returns the cached Module for a request, or None for core modules and misses."""
        self.ensure_alive()
        filename = self.resolver.resolve_filename(request, parent)
        return self.cache.get(filename)

    def invalidate(self, filename: str) -> bool:
        """Drops a path from the cache; handed-out Module objects are untouched."""
        self.ensure_alive()
        module = self.cache.pop(filename, None)
        if module is None:
            logger.warning(f"Cannot invalidate {filename}: not in the module cache")
            return False
        logger.debug(f"Invalidated module {filename}")
        return True

    def loader_for(self, filename: str) -> Loader:
        ext = vpath.extname(filename) or self.default_extension
        return self.loaders.get(ext) or self.loaders.get(self.default_extension) or load_source

    def require_async(self, request: str, parent: Optional[Module], callback: AsyncCallback) -> None:
        """Loads a module, falling back to the async provider when resolution fails.

        ``callback(error, exports)`` always runs after the current turn.

        Raises:
            AsyncNotCacheable: If the provider reports a module it does not allow to be cached.
        """
        self.ensure_alive()

        def call(error: Optional[BaseException], exports: Any = None) -> None:
            self.scheduler.call_soon(callback, error, exports)

        def load_into(filename: str) -> None:
            try:
                exports = self.load(filename, parent)
            except Exception as e:
                call(e)
            else:
                call(None, exports)

        try:
            filename = self.resolver.resolve_filename(request, parent)
        except ModuleNotFound as e:
            resolve_error: BaseException = e
        except Exception as e:
            return call(e)
        else:
            return load_into(filename)

        provider = self.fs.async_provider
        if provider is None:
            return call(resolve_error)

        resolve_module = getattr(provider, "resolve_module", None)
        if not callable(resolve_module):
            base = vpath.dirname(parent.filename) if parent is not None and parent.filename else self.fs.absolute(".")
            path = vpath.resolve(base, request)
            self.fs.read_file_async(path, lambda error, content: load_into(path))
            return

        def check(result: ProviderResult) -> None:
            info = coerce_info(result)
            if isinstance(info, BaseException):
                return call(info)
            if not isinstance(info, AsyncFileInfo) or not info.found or not info.is_file:
                return call(ModuleNotFound(request))
            if not info.cacheable:
                raise AsyncNotCacheable(request)
            real_path = info.real_path
            assert real_path is not None
            if info.has_content:
                self.fs.write_file(real_path, info.content)
                return load_into(real_path)
            self.fs.read_file_async(real_path, lambda error, content: load_into(real_path))

        immediate = resolve_module(request, parent, check)
        if immediate is not None:
            check(immediate)

    def clear(self) -> None:
        self.cache.clear()
        self.main_module = None
        self.resolver.clear()
