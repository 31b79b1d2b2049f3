"""
Type reference discovery.

Walks arbitrary nested data (mappings, sequences and scalars, no fixed
shape) and collects the type names referenced through ``ref``/``$ref``
fields. Array suffixes and generic arguments are normalized away, so
``List<Foo,Bar[]>[]`` references ``List``, ``Foo`` and ``Bar``.
"""

from collections.abc import Mapping
from typing import Any, Callable, Iterable, List, Optional

from ..logging_config import get_logger

logger = get_logger(__name__)


BUILT_IN_TYPES = frozenset(
    {
        "any",
        "map",
        "set",
        "string",
        "number",
        "integer",
        "int",
        "long",
        "short",
        "float",
        "double",
        "decimal",
        "boolean",
        "bool",
        "byte",
        "bytes",
        "char",
        "date",
        "datetime",
        "object",
        "void",
    }
)

# Reference names provided by the framework itself
TYPE_INSTANCE = "Instance"
TYPE_INSTANCE_PROVIDER = "InstanceProvider"
TYPE_PAGEABLE = "Pageable"

RESERVED_REFS = frozenset({TYPE_INSTANCE, TYPE_INSTANCE_PROVIDER, TYPE_PAGEABLE})

REF_FIELDS = ("ref", "$ref")


def is_built_in_type(name: str) -> bool:
    return name.lower() in BUILT_IN_TYPES


def normalize_type(type_ref: Optional[str]) -> List[str]:
    """
    Normalize a type reference into the names it refers to.

    The outer name comes first, followed by every generic argument
    (normalized recursively) from left to right.

    Args:
        type_ref: Reference such as ``Foo``, ``Foo[]`` or ``Map<String,Foo>``

    Returns:
        List of bare type names, empty for an empty reference
    """
    if not type_ref:
        return []

    type_ref = type_ref.strip()
    if type_ref.endswith("[]"):
        type_ref = type_ref[:-2].strip()

    if "<" not in type_ref:
        return [type_ref] if type_ref else []

    outer, _, inner = type_ref.partition("<")
    if inner.endswith(">"):
        inner = inner[:-1]

    names = [outer.strip()] if outer.strip() else []
    for argument in _split_arguments(inner):
        names.extend(normalize_type(argument))
    return names


def _split_arguments(text: str) -> List[str]:
    """Split generic arguments on commas that are not nested in ``<...>``."""
    arguments = []
    depth = 0
    current = []
    for char in text:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
        elif char == "," and depth == 0:
            arguments.append("".join(current))
            current = []
            continue
        current.append(char)
    arguments.append("".join(current))
    return [argument.strip() for argument in arguments if argument.strip()]


def _ref_of(node: Mapping) -> Optional[str]:
    for field in REF_FIELDS:
        value = node.get(field)
        if isinstance(value, str):
            return value
    return None


def _is_sequence(node: Any) -> bool:
    return isinstance(node, (list, tuple))


class TypeReferenceResolver:
    """
    Discovers the distinct type references reachable from a value.

    Discovery is depth first and order preserving: the result holds each
    name once, in the order it was first encountered.
    """

    def __init__(
        self,
        context: Any = None,
        include_all: bool = False,
        allowed: Optional[Iterable[str]] = None,
    ):
        """
        Initialize resolver.

        Args:
            context: Document context whose ``spec.entities.types`` lists the DTOs
            include_all: Emit every non built-in reference, not just DTOs
            allowed: Names to emit even when they are not DTOs
        """
        self.context = context
        self.include_all = include_all
        self.allowed = set(allowed or ())
        self._dto_names = _dto_names(context)

    def is_dto(self, name: str) -> bool:
        return name.lower() in self._dto_names

    def accepts(self, name: str) -> bool:
        """Check whether a normalized name should be surfaced."""
        if not name or is_built_in_type(name):
            return False

        if name in RESERVED_REFS:
            return False

        if self.include_all or name in self.allowed:
            return True

        return self.is_dto(name)

    def resolve(
        self, value: Any, on_match: Optional[Callable[[str], None]] = None
    ) -> List[str]:
        """
        Collect the references reachable from ``value``.

        Args:
            value: Arbitrary nested data
            on_match: Called exactly once per discovered name, in order

        Returns:
            Discovered names without duplicates
        """
        found: List[str] = []

        def visit(node: Any) -> None:
            if not node:
                return

            if _is_sequence(node):
                for item in node:
                    visit(item)
                return

            if isinstance(node, Mapping):
                ref = _ref_of(node)
                if ref is not None:
                    for name in normalize_type(ref):
                        if name in found or not self.accepts(name):
                            continue
                        found.append(name)
                        if on_match is not None:
                            on_match(name)
                    return

                for item in node.values():
                    visit(item)

        visit(value)
        logger.debug("Resolved %d type reference(s): %s", len(found), found)
        return found


def has_type_reference(value: Any, type_ref: str) -> bool:
    """
    Check whether ``value`` references ``type_ref`` anywhere.

    No DTO or built-in filtering is applied and the walk stops at the
    first hit.
    """

    def visit(node: Any) -> bool:
        if not node:
            return False

        if _is_sequence(node):
            return any(visit(item) for item in node)

        if isinstance(node, Mapping):
            ref = _ref_of(node)
            if ref is not None:
                return type_ref in normalize_type(ref)
            return any(visit(item) for item in node.values())

        return False

    return visit(value)


def _dto_names(context: Any) -> set:
    types = _get_path(context, ("spec", "entities", "types"))
    if not types or not _is_sequence(types):
        return set()

    names = set()
    for entity in types:
        if not isinstance(entity, Mapping):
            continue
        name = entity.get("name")
        if entity.get("type") == "dto" and isinstance(name, str) and name:
            names.add(name.lower())
    return names


def _get_path(value: Any, path: Iterable[str]) -> Any:
    for key in path:
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value
