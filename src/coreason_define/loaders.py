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
Module loaders keyed by file extension.

``.js`` files hold module bodies and run through the executor, ``.json`` files
hold structured data that becomes the exports as-is, and ``.node`` (native
binaries) cannot be loaded in memory.
"""

import json
from typing import TYPE_CHECKING, Any, Callable, Iterable

from coreason_define.exceptions import ManifestParseError
from coreason_define.vfs import VirtualFileSystem

if TYPE_CHECKING:  # pragma: no cover
    from coreason_define.module import Module

Loader = Callable[["Module", str], None]


def load_source(module: "Module", filename: str) -> None:
    content = module.graph.fs.read_file(filename)
    module.compile(content, filename)


def load_json(module: "Module", filename: str) -> None:
    module.exports = parse_json_file(module.graph.fs, filename)


def load_binary(module: "Module", filename: str) -> None:
    raise NotImplementedError("Loading binary modules is not implemented in this environment")


BUILTIN_LOADERS: dict[str, Loader] = {
    ".js": load_source,
    ".json": load_json,
    ".node": load_binary,
}


def create_loaders(extensions: Iterable[str]) -> dict[str, Loader]:
    """Builds the ordered extension table; unknown extensions load as source."""
    return {ext: BUILTIN_LOADERS.get(ext, load_source) for ext in extensions}


def parse_json_file(fs: VirtualFileSystem, filename: str) -> Any:
    """Reads structured content from the filesystem.

    Text and bytes are parsed as JSON, a callable is invoked to produce the
    value, and anything else is returned unchanged.

    Args:
        fs: The filesystem to read from.
        filename: Path of the file.

    Returns:
        Any: The parsed value.

    Raises:
        ManifestParseError: If text content is not valid JSON.
    """
    content = fs.read_file(filename)
    if isinstance(content, (str, bytes, bytearray)):
        try:
            return json.loads(content)
        except ValueError as e:
            raise ManifestParseError(filename, str(e)) from e
    if callable(content):
        return content()
    return content
