# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_define

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from coreason_define import vpath
from coreason_define.config import DefineSettings
from coreason_define.core_registry import CoreRegistry
from coreason_define.exceptions import SandboxDestroyed
from coreason_define.executor import ModuleExecutor
from coreason_define.graph import ModuleGraph
from coreason_define.loaders import create_loaders
from coreason_define.plugins import PluginRegistry
from coreason_define.resolution import Resolver
from coreason_define.scheduler import TickScheduler
from coreason_define.signals import Emitter
from coreason_define.utils.logger import logger
from coreason_define.vfs import VirtualFileSystem

if TYPE_CHECKING:  # pragma: no cover
    from coreason_define.sandbox import Sandbox


@dataclass
class SandboxContext:
    """Internals of one sandbox, as seen by plugin initializers.

    Owns exactly one of each subsystem. Nothing here is shared with another
    sandbox.
    """

    sandbox: "Sandbox"
    settings: DefineSettings
    executor: ModuleExecutor
    directory: str = vpath.SEP
    destructors: list[Callable[[], None]] = field(default_factory=list)
    destroyed: bool = False

    scheduler: TickScheduler = field(init=False, repr=False)
    fs: VirtualFileSystem = field(init=False, repr=False)
    core: CoreRegistry = field(init=False, repr=False)
    modules: ModuleGraph = field(init=False, repr=False)
    signals: Emitter = field(init=False, repr=False)
    plugins: PluginRegistry = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._destroying = False
        self.scheduler = TickScheduler()
        self.fs = VirtualFileSystem(
            self.scheduler,
            cwd=self.get_directory,
            strict=self.settings.strict_paths,
            ensure_alive=self.ensure_alive,
        )
        self.core = CoreRegistry(ensure_alive=self.ensure_alive)
        loaders = create_loaders(self.settings.extensions)
        resolver = Resolver(
            self.fs,
            self.core,
            self.settings,
            cwd=self.get_directory,
            extensions=loaders.keys,
        )
        self.modules = ModuleGraph(
            self.fs,
            self.core,
            resolver,
            self.executor,
            loaders,
            self.scheduler,
            default_extension=self.settings.default_extension,
            ensure_alive=self.ensure_alive,
        )
        self.signals = Emitter(ensure_alive=self.ensure_alive)
        self.plugins = PluginRegistry(self)

    def get_directory(self) -> str:
        return self.directory

    def ensure_alive(self) -> None:
        if self.destroyed:
            raise SandboxDestroyed("Sandbox has been destroyed")

    def destroy(self) -> None:
        """Runs teardown callbacks in registration order, then clears every subsystem.

        A callback that raises is logged and the remaining teardown continues.
        """
        if self.destroyed or self._destroying:
            return
        self._destroying = True
        try:
            for destructor in list(self.destructors):
                try:
                    destructor()
                except Exception as e:
                    logger.error(f"Error in sandbox teardown callback: {e}")
            self.modules.clear()
            self.core.clear()
            self.fs.destroy()
            self.signals.clear()
            self.plugins.clear()
            self.scheduler.clear()
            self.destructors.clear()
        finally:
            self.destroyed = True
            self._destroying = False
