# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_define
import importlib
import shutil
from pathlib import Path

import coreason_define.utils.logger as logger_module
import pytest


def test_logger_creates_log_directory() -> None:
    """
    Verify that the logger is initialized correctly and creates the logs directory.
    """
    importlib.reload(logger_module)
    log_dir = Path("logs")

    assert log_dir.is_dir()
    assert list(log_dir.glob("app.log*"))
    # stderr and file sinks
    assert len(logger_module.logger._core.handlers) == 2

    shutil.rmtree(log_dir)


def test_logger_reloading() -> None:
    """
    Verify that reloading the logger module re-runs the setup logic.
    """
    log_dir = Path("logs")
    if log_dir.exists():
        shutil.rmtree(log_dir)

    importlib.reload(logger_module)

    assert log_dir.is_dir()
    assert len(logger_module.logger._core.handlers) == 2
    shutil.rmtree(log_dir)


def test_logger_sinks(capsys: pytest.CaptureFixture[str]) -> None:
    """
    Verify that messages reach stderr and the serialized log file.
    """
    log_dir = Path("logs")
    if log_dir.exists():
        shutil.rmtree(log_dir)
    importlib.reload(logger_module)

    logger_module.logger.info("Module graph ready", sandbox_id="abc")

    captured = capsys.readouterr()
    assert "Module graph ready" in captured.err

    # Flush the enqueued file sink
    logger_module.logger.remove()
    content = (log_dir / "app.log").read_text()
    assert "Module graph ready" in content
    assert '"sandbox_id": "abc"' in content

    shutil.rmtree(log_dir)
    with capsys.disabled():
        importlib.reload(logger_module)
