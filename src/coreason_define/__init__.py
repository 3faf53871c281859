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
coreason-define
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .config import DefineSettings
from .context import SandboxContext
from .core_registry import CoreRegistry
from .exceptions import (
    AlreadyLoaded,
    AsyncNotCacheable,
    DefineError,
    FileNotFound,
    IllegalDirectoryOperation,
    ManifestParseError,
    ModuleNotFound,
    PathEscapeError,
    SandboxDestroyed,
)
from .executor import CallableExecutor, ModuleExecutor, PythonSourceExecutor
from .factory import ExecutorFactory
from .models import AsyncFileInfo, FileStat
from .module import Module, Require
from .sandbox import Sandbox
from .vfs import AsyncProvider, VirtualFileSystem

__all__ = [
    "Sandbox",
    "SandboxContext",
    "DefineSettings",
    "CoreRegistry",
    "VirtualFileSystem",
    "AsyncProvider",
    "AsyncFileInfo",
    "FileStat",
    "Module",
    "Require",
    "ModuleExecutor",
    "CallableExecutor",
    "PythonSourceExecutor",
    "ExecutorFactory",
    "DefineError",
    "ModuleNotFound",
    "FileNotFound",
    "IllegalDirectoryOperation",
    "AlreadyLoaded",
    "ManifestParseError",
    "AsyncNotCacheable",
    "SandboxDestroyed",
    "PathEscapeError",
]
