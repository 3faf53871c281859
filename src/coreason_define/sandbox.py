# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_define

import functools
from typing import Any, Callable, Optional, TypeVar, cast
from uuid import uuid4

from coreason_define import vpath
from coreason_define.config import DefineSettings
from coreason_define.context import SandboxContext
from coreason_define.core_registry import CoreRegistry
from coreason_define.executor import ModuleExecutor
from coreason_define.factory import ExecutorFactory
from coreason_define.graph import AsyncCallback, ModuleGraph
from coreason_define.models import FileStat
from coreason_define.module import Module
from coreason_define.plugins import Initializer
from coreason_define.utils.logger import logger
from coreason_define.vfs import AsyncProvider, VirtualFileSystem

F = TypeVar("F", bound=Callable[..., Any])


def _alive(method: F) -> F:
    """Fails fast when the sandbox has been destroyed."""

    @functools.wraps(method)
    def wrapper(self: "Sandbox", *args: Any, **kwargs: Any) -> Any:
        self._context.ensure_alive()
        return method(self, *args, **kwargs)

    return cast(F, wrapper)


class Sandbox:
    """An isolated module universe (The Core).

    Bundles one virtual filesystem, core registry, module cache, signal
    emitter, plugin list and current directory. Children created with
    ``create_child`` share none of them but receive every plugin again.
    """

    def __init__(
        self,
        settings: DefineSettings | None = None,
        executor: ModuleExecutor | None = None,
    ):
        """Initializes the Sandbox.

        Args:
            settings: Configuration for the sandbox. Defaults are read from the environment.
            executor: Optional executor; otherwise built from ``settings.executor``.
        """
        self.settings = settings or DefineSettings()
        self._executor = executor or ExecutorFactory.get_executor(self.settings)
        self.sandbox_id = str(uuid4())
        self._context = SandboxContext(self, self.settings, self._executor)

        core = self._context.core
        core.add("fs", self._context.fs)
        core.add("path", vpath)
        core.add_builder("module", lambda module_id: self._context.modules)
        logger.info("Sandbox created", sandbox_id=self.sandbox_id)

    def __enter__(self) -> "Sandbox":
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.destroy()

    # -- internals exposed to callers ------------------------------------

    @property
    def destroyed(self) -> bool:
        return self._context.destroyed

    @property
    @_alive
    def context(self) -> SandboxContext:
        return self._context

    @property
    @_alive
    def core(self) -> CoreRegistry:
        return self._context.core

    @property
    @_alive
    def fs(self) -> VirtualFileSystem:
        return self._context.fs

    @property
    @_alive
    def modules(self) -> ModuleGraph:
        return self._context.modules

    @property
    @_alive
    def main_module(self) -> Optional[Module]:
        return self._context.modules.main_module

    # -- module loading ---------------------------------------------------

    @_alive
    def require(self, request: str, *, reload: bool = False, directory: str | bool | None = None) -> Any:
        """Loads an entry module and returns its exports.

        Unless told otherwise, the current directory moves to the directory of
        an entry module that is not cached yet, so relative paths used by the
        module body land next to it.

        Args:
            request: Path, package name or core module id.
            reload: Drop a cached copy of the module first.
            directory: A path to change into before resolving, or False to
                leave the current directory alone.

        Returns:
            Any: The module exports.

        Raises:
            ModuleNotFound: If the request cannot be resolved.
        """
        filename = self._enter(request, reload, directory)
        return self._context.modules.load(filename, None, is_main=True)

    @_alive
    def get_module(
        self, request: str, *, reload: bool = False, directory: str | bool | None = None
    ) -> Optional[Module]:
        """Loads an entry module like ``require`` and returns its Module record.

        Returns None for core modules, which have no record.
        """
        filename = self._enter(request, reload, directory)
        modules = self._context.modules
        modules.load(filename, None, is_main=True)
        return modules.cache.get(filename)

    def _enter(self, request: str, reload: bool, directory: str | bool | None) -> str:
        if isinstance(directory, str):
            self.chdir(directory)
        modules = self._context.modules
        filename = modules.resolver.resolve_filename(request)
        if self._context.core.exists(filename):
            return filename
        if reload and filename in modules.cache:
            modules.invalidate(filename)
        if directory is not False and not isinstance(directory, str) and filename not in modules.cache:
            self._context.directory = vpath.dirname(filename)
        return filename

    @_alive
    def resolve(self, request: str) -> str:
        return self._context.modules.resolver.resolve_filename(request)

    @_alive
    def require_async(self, request: str, callback: AsyncCallback) -> None:
        """Loads a module, consulting the async provider on a miss.

        ``callback(error, exports)`` runs on the next ``run_pending``.
        """
        self._context.modules.require_async(request, None, callback)

    @_alive
    def run_pending(self) -> int:
        """Runs queued asynchronous continuations; returns how many ran."""
        return self._context.scheduler.run_pending()

    # -- current directory ------------------------------------------------

    @_alive
    def cwd(self) -> str:
        return self._context.directory

    @_alive
    def chdir(self, directory: str) -> None:
        self._context.directory = vpath.resolve(
            self._context.directory, directory, strict=self.settings.strict_paths
        )

    # -- filesystem pass-throughs -----------------------------------------

    @_alive
    def define(self, path: str, content: Any) -> None:
        """Registers module content at a path."""
        self._context.fs.write_file(path, content)

    @_alive
    def write_file(self, path: str, content: Any) -> None:
        self._context.fs.write_file(path, content)

    @_alive
    def read_file(self, path: str) -> Any:
        return self._context.fs.read_file(path)

    @_alive
    def stat(self, path: str) -> FileStat:
        return self._context.fs.stat(path)

    @_alive
    def exists(self, path: str) -> bool:
        return self._context.fs.exists(path)

    @_alive
    def readdir(self, path: str) -> list[str]:
        return self._context.fs.readdir(path)

    @_alive
    def mkdir(self, path: str) -> None:
        self._context.fs.mkdir(path)

    @_alive
    def exists_async(self, path: str, callback: Callable[[bool], Any]) -> None:
        self._context.fs.exists_async(path, callback)

    @_alive
    def stat_async(self, path: str, callback: Callable[..., Any]) -> None:
        self._context.fs.stat_async(path, callback)

    @_alive
    def read_file_async(self, path: str, callback: Callable[..., Any]) -> None:
        self._context.fs.read_file_async(path, callback)

    @_alive
    def readdir_async(self, path: str, callback: Callable[..., Any]) -> None:
        self._context.fs.readdir_async(path, callback)

    @_alive
    def set_async_provider(self, provider: AsyncProvider | None) -> None:
        self._context.fs.async_provider = provider

    # -- signals, plugins, lifecycle --------------------------------------

    @_alive
    def on(self, event: str, listener: Callable[..., Any]) -> None:
        self._context.signals.on(event, listener)

    @_alive
    def signal(self, event: str, *args: Any) -> None:
        """Fires an event; ``exit`` destroys the sandbox after its listeners run."""
        self._context.signals.fire(event, *args)
        if event == "exit":
            self.destroy()

    @_alive
    def add_plugin(self, name: str, initializer: Initializer) -> Any:
        """Registers a plugin and applies it to this sandbox immediately.

        The plugin is replayed onto every child created afterwards.

        Args:
            name: Plugin name.
            initializer: Called with the sandbox context.

        Returns:
            Any: The initializer's return value.
        """
        return self._context.plugins.append(name, initializer)

    @_alive
    def create_child(self) -> "Sandbox":
        """Creates an independent sandbox carrying this sandbox's plugins.

        The child gets a copy of the settings and fresh subsystems. Plugins
        are re-run against it in their original order. If one of them raises,
        the child is destroyed and the error propagates.
        """
        child = Sandbox(settings=self.settings.model_copy(deep=True), executor=self._executor)
        try:
            self._context.plugins.apply_to(child)
        except Exception:
            child.destroy()
            raise
        logger.info("Child sandbox created", parent_id=self.sandbox_id, sandbox_id=child.sandbox_id)
        return child

    @_alive
    def add_destructor(self, callback: Callable[[], None]) -> None:
        """Registers a teardown callback; callbacks run in registration order."""
        self._context.destructors.append(callback)

    def destroy(self) -> None:
        """Tears the sandbox down. Every later operation raises SandboxDestroyed."""
        if self._context.destroyed:
            return
        self._context.destroy()
        logger.info("Sandbox destroyed", sandbox_id=self.sandbox_id)
