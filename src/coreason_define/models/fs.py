# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_define

"""Data models exchanged with the virtual filesystem and its providers."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class FileStat(BaseModel):
    """Stripped-down stat result of a virtual path."""

    model_config = ConfigDict(frozen=True)

    is_file: bool = Field(..., description="True for a regular file, False for a directory.")

    @property
    def is_directory(self) -> bool:
        return not self.is_file


class AsyncFileInfo(BaseModel):
    """
    Result reported by an asynchronous content provider.

    ``real_path`` of None means the path was not found. Whether ``content``
    was supplied at all is tracked separately from its value, since None is
    valid file content.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    real_path: Optional[str] = Field(None, description="Resolved absolute path, or None when not found.")
    is_file: bool = Field(True, description="Whether the path is a regular file.")
    cacheable: bool = Field(False, description="Whether the result may be stored in the virtual filesystem.")
    content: Any = Field(None, description="File content, when the provider supplies it.")

    @property
    def found(self) -> bool:
        return self.real_path is not None

    @property
    def has_content(self) -> bool:
        return "content" in self.model_fields_set
