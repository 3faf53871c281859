# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_define

from collections import deque
from typing import Any, Callable


class TickScheduler:
    """Queue of continuations that run after the current synchronous turn.

    Nothing queued here runs from inside the call that queued it. Callbacks
    fire in FIFO order when the owner drains the queue with ``run_pending``.
    """

    def __init__(self) -> None:
        self._queue: deque[tuple[Callable[..., Any], tuple[Any, ...]]] = deque()

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        """Queues ``callback(*args)`` for the next drain."""
        self._queue.append((callback, args))

    def run_pending(self) -> int:
        """Runs queued callbacks, including ones queued while draining.

        Returns:
            int: The number of callbacks that ran.
        """
        count = 0
        while self._queue:
            callback, args = self._queue.popleft()
            callback(*args)
            count += 1
        return count

    def clear(self) -> None:
        self._queue.clear()

    def __len__(self) -> int:
        return len(self._queue)
