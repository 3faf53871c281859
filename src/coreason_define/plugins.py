# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_define

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from coreason_define.utils.logger import logger

if TYPE_CHECKING:  # pragma: no cover
    from coreason_define.context import SandboxContext
    from coreason_define.sandbox import Sandbox

Initializer = Callable[["SandboxContext"], Any]


@dataclass(frozen=True)
class Plugin:
    name: str
    initializer: Initializer


class PluginRegistry:
    """Ordered plugins of one sandbox, replayed onto each of its children."""

    def __init__(self, context: "SandboxContext"):
        self.context = context
        self.plugins: list[Plugin] = []

    def append(self, name: str, initializer: Initializer) -> Any:
        """Records a plugin and runs its initializer against this sandbox.

        Args:
            name: Plugin name.
            initializer: Called with the sandbox context; may mutate it.

        Returns:
            Any: Whatever the initializer returns.
        """
        self.context.ensure_alive()
        self.plugins.append(Plugin(name, initializer))
        logger.info(f"Applying plugin '{name}'")
        return initializer(self.context)

    def apply_to(self, sandbox: "Sandbox") -> None:
        """Replays every recorded plugin, in registration order, onto another sandbox."""
        for plugin in list(self.plugins):
            sandbox.add_plugin(plugin.name, plugin.initializer)

    def names(self) -> list[str]:
        return [plugin.name for plugin in self.plugins]

    def clear(self) -> None:
        self.plugins.clear()
