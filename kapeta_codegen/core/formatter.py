"""
Base code formatter used by the template helpers.

A CodeFormatter is the naming strategy of one target language. It is a
set of pure functions: templates call it through the formatting helpers,
and a language plugs in by subclassing and overriding the methods whose
conventions differ.
"""

from collections.abc import Mapping
from typing import Any, Iterable, Optional, Union

from .naming import lower_first, upper_first


TypeLike = Union[str, Mapping, Any]


def type_name(value: Optional[TypeLike]) -> str:
    """
    Extract the bare type name from a type-like value.

    Accepts a plain name, a mapping with a ``ref``/``$ref``/``type`` entry
    or any object exposing ``ref`` or ``type`` attributes.
    """
    if not value:
        return ""

    if isinstance(value, str):
        return value

    if isinstance(value, Mapping):
        name = value.get("ref") or value.get("$ref") or value.get("type")
    else:
        name = getattr(value, "ref", None) or getattr(value, "type", None)

    return name if isinstance(name, str) else ""


class CodeFormatter:
    """Default formatting strategy (Java/TypeScript conventions)."""

    def comment(self, value: str) -> str:
        return value

    def method(self, value: str) -> str:
        return value

    def string(self, value: str) -> str:
        return value

    def namespace(self, value: str) -> str:
        return (value or "").lower()

    def arguments(self, values: Iterable[str]) -> str:
        return ", ".join(values)

    def methods(self, values: Iterable[str]) -> str:
        return "\n\n".join(values)

    def type(self, value: Optional[TypeLike]) -> str:
        """Return the capitalized type name, or ``void`` when there is none."""
        name = type_name(value)
        if not name:
            return "void"
        return upper_first(name)

    def constant(self, value: str) -> str:
        if not value:
            return ""
        return value.upper()

    def variable(self, value: Optional[TypeLike]) -> str:
        return lower_first(self.type(value))

    def getter(self, type_like: TypeLike, property_id: str) -> str:
        prefix = "get"
        if type_name(type_like).lower() == "boolean":
            prefix = "is"
        return prefix + upper_first(property_id)

    def setter(self, type_like: TypeLike, property_id: str) -> str:
        return "set" + upper_first(property_id)

    def return_type(self, value: Optional[TypeLike]) -> str:
        if not value:
            return "void"
        return self.type(value)
