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
POSIX path handling for the virtual filesystem.

Pure string functions, modelled on the subset of ``posixpath`` a module
loader needs. Exposed to modules as the core module ``path``.
"""

import re

from coreason_define.exceptions import PathEscapeError

SEP = "/"

_DIRNAME_RE = re.compile(r"/[^/]+/*$")
_BASENAME_RE = re.compile(r"([^/]+)/*$")
_EXTNAME_RE = re.compile(r"(\.[^/.]*)/*$")


def is_absolute(path: str) -> bool:
    return path.startswith(SEP)


def normalize(path: str, strict: bool = False) -> str:
    """Collapses ``.``, ``..`` and repeated separators.

    A ``..`` with nothing left to pop is dropped, so ``/../a`` becomes ``/a``.
    With ``strict`` set, an absolute path that climbs above the root raises
    instead.

    Args:
        path: The path to normalize.
        strict: Reject out-of-root ``..`` segments on absolute paths.

    Returns:
        str: The normalized path, absolute iff the input was.

    Raises:
        PathEscapeError: If ``strict`` is set and the path escapes the root.
    """
    absolute = is_absolute(path)
    result: list[str] = []
    for item in path.lstrip(SEP).split(SEP):
        if item == "..":
            if result:
                result.pop()
            elif strict and absolute:
                raise PathEscapeError(path)
        elif item in (".", ""):
            continue
        else:
            result.append(item)
    return (SEP if absolute else "") + SEP.join(result)


def resolve(*paths: str, strict: bool = False) -> str:
    """Joins path segments left to right; an absolute segment restarts the join."""
    components: list[str] = []
    for item in paths:
        if is_absolute(item):
            components = []
        components.append(item)
    return normalize(SEP.join(components), strict=strict)


def dirname(path: str) -> str:
    match = _DIRNAME_RE.search(path)
    if match is None:
        return SEP if is_absolute(path) else "."
    head = path[: match.start()]
    if not head and is_absolute(path):
        return SEP
    return head


def basename(path: str) -> str:
    match = _BASENAME_RE.search(path)
    if match is None:
        raise ValueError(f"Path has no base name: '{path}'")
    return match.group(1)


def extname(path: str) -> str:
    match = _EXTNAME_RE.search(path)
    return match.group(1) if match else ""
