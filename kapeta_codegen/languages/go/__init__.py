"""
Go target support.

Provides the Go code formatter and Go naming rules.
"""

from .formatter import GoCodeFormatter
from .naming import GO_BUILTIN_TYPES, GO_RESERVED_WORDS, create_go_sanitizer

__all__ = [
    "GoCodeFormatter",
    "GO_BUILTIN_TYPES",
    "GO_RESERVED_WORDS",
    "create_go_sanitizer",
]
