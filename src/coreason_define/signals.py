# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_define

from collections import defaultdict
from typing import Any, Callable

Listener = Callable[..., Any]


class Emitter:
    """Named event listeners of one sandbox."""

    def __init__(self, ensure_alive: Callable[[], None] = lambda: None) -> None:
        self.listeners: defaultdict[str, list[Listener]] = defaultdict(list)
        self.ensure_alive = ensure_alive

    def on(self, event: str, listener: Listener) -> None:
        self.ensure_alive()
        self.listeners[event].append(listener)

    def fire(self, event: str, *args: Any) -> None:
        self.ensure_alive()
        # Snapshot so a listener may subscribe further listeners
        for listener in list(self.listeners.get(event, ())):
            listener(*args)

    def clear(self) -> None:
        self.listeners.clear()
