# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_define

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover
    from coreason_define.module import Module, Require


class ModuleExecutor(ABC):
    """
    Abstract base class for module executors.
    Follows the Strategy Pattern.
    """

    @abstractmethod
    def execute(
        self,
        content: Any,
        exports: Any,
        require: "Require",
        module: "Module",
        filename: str,
        dirname: str,
    ) -> None:
        """Run module content against its bindings.

        The content populates ``exports`` in place or replaces
        ``module.exports``. Whatever it raises propagates to the caller of
        ``require``.

        Args:
            content: The stored file content.
            exports: The module's exports container.
            require: Requestor bound to the module.
            module: The module record.
            filename: Absolute path of the module file.
            dirname: Directory of the module file.

        Raises:
            TypeError: If the executor cannot run this kind of content.
        """
        pass  # pragma: no cover


class CallableExecutor(ModuleExecutor):
    """Runs module bodies stored as callables taking the five bindings."""

    def execute(
        self,
        content: Any,
        exports: Any,
        require: "Require",
        module: "Module",
        filename: str,
        dirname: str,
    ) -> None:
        if not callable(content):
            raise TypeError(f"Module content of {filename} is not callable: {type(content).__name__}")
        content(exports, require, module, filename, dirname)


class PythonSourceExecutor(CallableExecutor):
    """Also runs Python source text, with the bindings as module globals.

    The source sees ``exports``, ``require``, ``module``, ``__file__`` and
    ``__dirname__``. The executor is trusted: no isolation is attempted.
    """

    def execute(
        self,
        content: Any,
        exports: Any,
        require: "Require",
        module: "Module",
        filename: str,
        dirname: str,
    ) -> None:
        if isinstance(content, bytes):
            content = content.decode("utf-8")
        if not isinstance(content, str):
            super().execute(content, exports, require, module, filename, dirname)
            return

        code = compile(content, filename, "exec")
        namespace: dict[str, Any] = {
            "__name__": module.id,
            "__file__": filename,
            "__dirname__": dirname,
            "exports": exports,
            "require": require,
            "module": module,
        }
        exec(code, namespace)
