# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_define

from typing import TYPE_CHECKING, Any, Callable, Optional

from coreason_define import vpath
from coreason_define.exceptions import AlreadyLoaded

if TYPE_CHECKING:  # pragma: no cover
    from coreason_define.graph import ModuleGraph
    from coreason_define.loaders import Loader


class Module:
    """A unit of loaded content, identified by its absolute path.

    Handed to the executor as the ``module`` binding; a module body may
    replace ``exports`` wholesale.
    """

    def __init__(self, module_id: str, parent: Optional["Module"], graph: "ModuleGraph"):
        self.id = module_id
        self.filename: Optional[str] = None
        self.exports: Any = {}
        self.loaded = False
        self.parent = parent
        self.children: list[Module] = []
        self.paths: list[str] = []
        self.graph = graph
        if parent is not None:
            parent.children.append(self)

    def load(self, filename: str) -> None:
        """Loads the module content through the loader of its extension.

        Args:
            filename: Absolute path of the module file.

        Raises:
            AlreadyLoaded: If the module has been loaded before.
        """
        if self.loaded:
            raise AlreadyLoaded(self.id)
        self.filename = filename
        self.paths = self.graph.resolver.node_module_paths(vpath.dirname(filename))
        self.graph.loader_for(filename)(self, filename)
        self.loaded = True

    def require(self, request: str) -> Any:
        return self.graph.load(request, self)

    def compile(self, content: Any, filename: str) -> None:
        """Hands the content to the executor with this module's bindings."""
        self.graph.executor.execute(
            content,
            self.exports,
            Require(self),
            self,
            filename,
            vpath.dirname(filename),
        )

    def __repr__(self) -> str:
        return f"Module(id={self.id!r}, filename={self.filename!r}, loaded={self.loaded})"


class Require:
    """The ``require`` binding of one module."""

    def __init__(self, module: Module):
        self.module = module

    def __call__(self, request: str) -> Any:
        return self.module.require(request)

    def resolve(self, request: str) -> str:
        """Returns the path (or core id) a request would load, without loading it."""
        graph = self.module.graph
        graph.ensure_alive()
        return graph.resolver.resolve_filename(request, self.module)

    def require_async(self, request: str, callback: Callable[[Optional[BaseException], Any], Any]) -> None:
        """Loads a module, consulting the async provider on a miss.

        ``callback(error, exports)`` runs after the current turn.
        """
        self.module.graph.require_async(request, self.module, callback)

    @property
    def main(self) -> Optional[Module]:
        self.module.graph.ensure_alive()
        return self.module.graph.main_module

    @property
    def cache(self) -> dict[str, Module]:
        self.module.graph.ensure_alive()
        return self.module.graph.cache

    @property
    def extensions(self) -> dict[str, "Loader"]:
        self.module.graph.ensure_alive()
        return self.module.graph.loaders
