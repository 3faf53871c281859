# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_define

"""Error taxonomy of the module loader."""


class DefineError(Exception):
    """Base class for every error raised by coreason-define."""


class ModuleNotFound(DefineError, LookupError):
    """Resolution exhausted all strategies for a request."""

    code = "MODULE_NOT_FOUND"

    def __init__(self, request: str | None):
        super().__init__(f"Cannot find module '{request}'")
        self.request = request


class FileNotFound(DefineError, FileNotFoundError):
    """The virtual filesystem has no entry at a path."""

    def __init__(self, path: str):
        super().__init__(f"no such file or directory '{path}'")
        self.path = path


class IllegalDirectoryOperation(DefineError, OSError):
    """A file operation targets a directory, or a directory operation a file."""

    def __init__(self, path: str, message: str = "illegal operation on a directory"):
        super().__init__(f"EISDIR, {message} '{path}'")
        self.path = path


class AlreadyLoaded(DefineError):
    """A module's load entry point was invoked a second time."""

    def __init__(self, module_id: str):
        super().__init__(f"Module '{module_id}' is already loaded")
        self.module_id = module_id


class ManifestParseError(DefineError, ValueError):
    """Structured content (a manifest or a .json module) failed to parse."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Error parsing {path}: {reason}")
        self.path = path


class AsyncNotCacheable(DefineError):
    """An asynchronous provider returned a module that cannot be cached."""

    def __init__(self, request: str):
        super().__init__(f"Async module '{request}' is not cacheable")
        self.request = request


class SandboxDestroyed(DefineError, RuntimeError):
    """An operation was attempted on a destroyed sandbox."""


class PathEscapeError(DefineError, ValueError):
    """A '..' segment climbs above the root of an absolute path."""

    def __init__(self, path: str):
        super().__init__(f"Path escapes the filesystem root: '{path}'")
        self.path = path
