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
Awaitable facade over the continuation-style asynchronous operations.

Each coroutine registers a continuation, then drains the sandbox scheduler
until it fires, yielding to the event loop in between so that providers
answering from other tasks can make progress.
"""

from typing import Any, Callable

import anyio

from coreason_define.models import FileStat
from coreason_define.sandbox import Sandbox


async def _await_continuation(sandbox: Sandbox, start: Callable[[Callable[..., None]], None]) -> tuple[Any, ...]:
    done = anyio.Event()
    outcome: list[tuple[Any, ...]] = []

    def continuation(*args: Any) -> None:
        outcome.append(args)
        done.set()

    start(continuation)
    while not done.is_set():
        sandbox.run_pending()
        if done.is_set():
            break
        with anyio.move_on_after(sandbox.settings.poll_interval):
            await done.wait()
    return outcome[0]


async def exists(sandbox: Sandbox, path: str) -> bool:
    (found,) = await _await_continuation(sandbox, lambda cb: sandbox.exists_async(path, cb))
    return bool(found)


async def stat(sandbox: Sandbox, path: str) -> FileStat:
    """Stats a path, consulting the async provider on a miss.

    Raises:
        FileNotFound: If neither the filesystem nor the provider knows the path.
    """
    error, result = await _await_continuation(sandbox, lambda cb: sandbox.stat_async(path, cb))
    if error is not None:
        raise error
    return result


async def read_file(sandbox: Sandbox, path: str) -> Any:
    """Reads a file, consulting the async provider on a miss.

    Raises:
        FileNotFound: If neither the filesystem nor the provider knows the path.
        IllegalDirectoryOperation: If the path is a directory.
    """
    error, content = await _await_continuation(sandbox, lambda cb: sandbox.read_file_async(path, cb))
    if error is not None:
        raise error
    return content


async def readdir(sandbox: Sandbox, path: str) -> list[str]:
    error, names = await _await_continuation(sandbox, lambda cb: sandbox.readdir_async(path, cb))
    if error is not None:
        raise error
    return list(names)


async def require(sandbox: Sandbox, request: str) -> Any:
    """Loads a module, letting the async provider supply it when it is not yet defined.

    Raises:
        ModuleNotFound: If no source can supply the module.
    """
    error, exports = await _await_continuation(sandbox, lambda cb: sandbox.require_async(request, cb))
    if error is not None:
        raise error
    return exports
