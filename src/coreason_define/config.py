# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_define

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DefineSettings(BaseSettings):
    """
    Configuration for a module sandbox.
    """

    executor: Literal["callable", "python"] = "python"

    # Probed in order when a request has no extension
    extensions: list[str] = [".js", ".json", ".node"]
    default_extension: str = ".js"

    # Package resolution
    dir_main: list[str] = ["index"]
    package_main: list[str] = ["main"]
    manifest_name: str = "package.json"
    package_dir: str = "node_modules"
    global_paths: list[str] = []

    # Raise on '..' above the root instead of dropping it
    strict_paths: bool = False

    # Wait granularity of the awaitable facade (seconds)
    poll_interval: float = 0.01

    model_config = SettingsConfigDict(
        env_prefix="COREASON_DEFINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("extensions")
    @classmethod
    def _extensions_are_dotted(cls, value: list[str]) -> list[str]:
        for ext in value:
            if not ext.startswith("."):
                raise ValueError(f"Extension must start with a dot: {ext!r}")
        return value

    @field_validator("global_paths")
    @classmethod
    def _global_paths_are_absolute(cls, value: list[str]) -> list[str]:
        for path in value:
            if not path.startswith("/"):
                raise ValueError(f"Global search path must be absolute: {path!r}")
        return value
