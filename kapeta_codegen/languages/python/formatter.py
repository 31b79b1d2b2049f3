"""
Python code formatter.

Classes are PascalCase, everything callable or assignable snake_case and
constants SCREAMING_SNAKE_CASE, following PEP 8.
"""

from typing import Optional

from ...core.formatter import CodeFormatter, TypeLike, type_name
from ...core.naming import NamingCase
from .naming import create_python_sanitizer


class PythonCodeFormatter(CodeFormatter):
    """Formatting strategy for Python targets."""

    def __init__(self):
        self.sanitizer = create_python_sanitizer()

    def type(self, value: Optional[TypeLike]) -> str:
        name = type_name(value)
        if not name:
            return "None"
        if self.sanitizer.is_builtin(name):
            return name
        return self.sanitizer.sanitize_name(name, NamingCase.PASCAL_CASE)

    def return_type(self, value: Optional[TypeLike]) -> str:
        if not value:
            return "None"
        return self.type(value)

    def variable(self, value: Optional[TypeLike]) -> str:
        name = type_name(value)
        if not name:
            return ""
        return self.sanitizer.sanitize_name(name, NamingCase.SNAKE_CASE)

    def method(self, value: str) -> str:
        if not value:
            return ""
        return self.sanitizer.sanitize_name(value, NamingCase.SNAKE_CASE)

    def constant(self, value: str) -> str:
        if not value:
            return ""
        return self.sanitizer.sanitize_name(value, NamingCase.SCREAMING_SNAKE)

    def namespace(self, value: str) -> str:
        if not value:
            return ""
        return self.sanitizer.sanitize_name(value, NamingCase.SNAKE_CASE)

    def string(self, value: str) -> str:
        return (value or "").replace("\\", "\\\\").replace('"', '\\"')

    def getter(self, type_like: TypeLike, property_id: str) -> str:
        prefix = "get"
        if type_name(type_like).lower() in ("boolean", "bool"):
            prefix = "is"
        return f"{prefix}_{self.sanitizer.sanitize_name(property_id, NamingCase.SNAKE_CASE)}"

    def setter(self, type_like: TypeLike, property_id: str) -> str:
        return f"set_{self.sanitizer.sanitize_name(property_id, NamingCase.SNAKE_CASE)}"
