"""
Go code formatter.

Exported names are PascalCase, unexported ones camelCase, package
names a single lower-case word. Getters drop the ``Get`` prefix as is
idiomatic in Go.
"""

import re
from typing import Optional

from ...core.formatter import CodeFormatter, TypeLike, type_name
from ...core.naming import NamingCase
from .naming import create_go_sanitizer


class GoCodeFormatter(CodeFormatter):
    """Formatting strategy for Go targets."""

    def __init__(self):
        self.sanitizer = create_go_sanitizer()

    def type(self, value: Optional[TypeLike]) -> str:
        name = type_name(value)
        if not name:
            return "void"
        if self.sanitizer.is_builtin(name):
            return name
        return self.sanitizer.sanitize_name(name, NamingCase.PASCAL_CASE)

    def variable(self, value: Optional[TypeLike]) -> str:
        name = type_name(value)
        if not name:
            return "void"
        return self.sanitizer.sanitize_name(name, NamingCase.CAMEL_CASE)

    def namespace(self, value: str) -> str:
        return re.sub(r"[^a-z0-9]", "", (value or "").lower())

    def string(self, value: str) -> str:
        return (value or "").replace("\\", "\\\\").replace('"', '\\"')

    def getter(self, type_like: TypeLike, property_id: str) -> str:
        return self.sanitizer.sanitize_name(property_id, NamingCase.PASCAL_CASE)

    def setter(self, type_like: TypeLike, property_id: str) -> str:
        return "Set" + self.sanitizer.sanitize_name(property_id, NamingCase.PASCAL_CASE)
