# src/coreason_define/models/__init__.py

"""
Data models for the virtual filesystem.
"""

from .fs import AsyncFileInfo, FileStat

__all__ = ["AsyncFileInfo", "FileStat"]
