"""Filesystem access used during resolution.

The resolver only needs three operations. They sit behind a small protocol
so tests can substitute an in-memory layout for the real service-account
mount paths.
"""

from pathlib import Path
from typing import Protocol

__all__ = ["FileSystem", "LocalFileSystem"]


class FileSystem(Protocol):
    def is_file(self, path: str | Path) -> bool: ...

    def is_dir(self, path: str | Path) -> bool: ...

    def read_text(self, path: str | Path) -> str: ...


class LocalFileSystem:
    """The real filesystem."""

    def is_file(self, path: str | Path) -> bool:
        return Path(path).is_file()

    def is_dir(self, path: str | Path) -> bool:
        return Path(path).is_dir()

    def read_text(self, path: str | Path) -> str:
        return Path(path).read_text(encoding="utf-8")
