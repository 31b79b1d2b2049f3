"""
Records exchanged between the generator and its callers.

GeneratedFile is what a target produces; GeneratedAsset and SourceFile
describe files that already exist on disk and are only consumed by the
merge extension point.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


DEFAULT_PERMISSIONS = "644"


class FileMode(str, Enum):
    """Write policy of a generated file."""

    WRITE_ALWAYS = "write-always"
    CREATE_ONLY = "create-only"
    MERGE = "merge"
    SKIP = "skip"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class GeneratedFile:
    """A single output file produced by a target."""

    filename: str
    content: str
    mode: FileMode = FileMode.WRITE_ALWAYS
    permissions: str = DEFAULT_PERMISSIONS


@dataclass(frozen=True)
class GeneratedAsset:
    """A generated file that has been written to disk."""

    filename: str
    mode: FileMode
    permissions: str
    modified: Optional[int] = None
    checksum: Optional[str] = None


@dataclass(frozen=True)
class SourceFile:
    """A file as it currently exists in the hand-authored source tree."""

    filename: str
    content: str
    permissions: str = DEFAULT_PERMISSIONS
