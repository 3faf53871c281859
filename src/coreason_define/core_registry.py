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
from enum import Enum
from typing import Any, Callable, Optional

from coreason_define.exceptions import ModuleNotFound

Builder = Callable[[str], Any]


class SlotState(Enum):
    EAGER = "eager"
    PENDING = "pending"
    CONSUMED = "consumed"


@dataclass
class CoreEntry:
    state: SlotState
    value: Any = None
    builder: Optional[Builder] = None


class CoreRegistry:
    """Built-in modules addressed by id rather than by path.

    Each id holds an eager value, a pending builder, or a consumed slot. A
    builder runs at most once: the slot is consumed before the builder is
    called and becomes eager with the result when it returns. A consumed slot
    that never produced a value behaves as if nothing was registered.
    """

    def __init__(self, ensure_alive: Callable[[], None] = lambda: None) -> None:
        self._entries: dict[str, CoreEntry] = {}
        self.ensure_alive = ensure_alive

    def add(self, module_id: str, value: Any) -> None:
        self.ensure_alive()
        self._entries[module_id] = CoreEntry(SlotState.EAGER, value=value)

    def add_builder(self, module_id: str, builder: Builder) -> None:
        self.ensure_alive()
        self._entries[module_id] = CoreEntry(SlotState.PENDING, builder=builder)

    def exists(self, module_id: str) -> bool:
        self.ensure_alive()
        entry = self._entries.get(module_id)
        return entry is not None and entry.state is not SlotState.CONSUMED

    def require(self, module_id: str) -> Any:
        """Returns a core module, building it on first access.

        Args:
            module_id: The core module id.

        Returns:
            Any: The memoized module value.

        Raises:
            ModuleNotFound: If no value or pending builder is registered.
        """
        self.ensure_alive()
        entry = self._entries.get(module_id)
        if entry is None or entry.state is SlotState.CONSUMED:
            raise ModuleNotFound(module_id)
        if entry.state is SlotState.EAGER:
            return entry.value

        builder = entry.builder
        assert builder is not None
        entry.state = SlotState.CONSUMED
        entry.builder = None
        value = builder(module_id)
        if self._entries.get(module_id) is entry:
            entry.state = SlotState.EAGER
            entry.value = value
        return value

    def remove(self, module_id: str) -> bool:
        """Removes a core module; returns whether a value or builder was present."""
        self.ensure_alive()
        entry = self._entries.pop(module_id, None)
        return entry is not None and entry.state is not SlotState.CONSUMED

    def ids(self) -> list[str]:
        self.ensure_alive()
        return [module_id for module_id in self._entries if self.exists(module_id)]

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, module_id: str) -> bool:
        return self.exists(module_id)
