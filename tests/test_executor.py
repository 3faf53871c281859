# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_define
from typing import Any
from unittest.mock import MagicMock

import pytest
from coreason_define import CallableExecutor, DefineSettings, ExecutorFactory, PythonSourceExecutor


def test_factory_returns_configured_executor() -> None:
    assert isinstance(ExecutorFactory.get_executor(DefineSettings(executor="callable")), CallableExecutor)
    executor = ExecutorFactory.get_executor(DefineSettings(executor="python"))
    assert isinstance(executor, PythonSourceExecutor)


def test_callable_executor_passes_bindings() -> None:
    body = MagicMock()
    exports: dict[str, Any] = {}
    require = MagicMock()
    module = MagicMock()

    CallableExecutor().execute(body, exports, require, module, "/a/b.js", "/a")

    body.assert_called_once_with(exports, require, module, "/a/b.js", "/a")


def test_callable_executor_rejects_non_callable() -> None:
    with pytest.raises(TypeError, match="not callable: int"):
        CallableExecutor().execute(5, {}, MagicMock(), MagicMock(), "/a.js", "/")


def test_python_executor_runs_source() -> None:
    module = MagicMock()
    module.id = "/a/b.js"
    require = MagicMock(return_value={"dep": 1})
    exports: dict[str, Any] = {}

    PythonSourceExecutor().execute(
        "exports['name'] = __name__\nexports['dep'] = require('./dep')\nexports['dir'] = __dirname__",
        exports,
        require,
        module,
        "/a/b.js",
        "/a",
    )

    assert exports == {"name": "/a/b.js", "dep": {"dep": 1}, "dir": "/a"}
    require.assert_called_once_with("./dep")


def test_python_executor_decodes_bytes() -> None:
    exports: dict[str, Any] = {}
    PythonSourceExecutor().execute(b"exports['ok'] = True", exports, MagicMock(), MagicMock(), "/a.js", "/")
    assert exports == {"ok": True}


def test_python_executor_runs_callables() -> None:
    body = MagicMock()
    PythonSourceExecutor().execute(body, {}, MagicMock(), MagicMock(), "/a.js", "/")
    body.assert_called_once()


def test_python_executor_propagates_errors() -> None:
    with pytest.raises(SyntaxError):
        PythonSourceExecutor().execute("def (", {}, MagicMock(), MagicMock(), "/bad.js", "/")
    with pytest.raises(ZeroDivisionError):
        PythonSourceExecutor().execute("1 / 0", {}, MagicMock(), MagicMock(), "/bad.js", "/")
