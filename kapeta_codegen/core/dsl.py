"""
Bridge between templates and the DSL parser.

Blocks may carry free-form source (data types, configuration, REST
methods) written in the kaplang DSL. Parsing it is the job of an
external parser; this module defines the interface that parser must
implement and reshapes its output into the entity list templates
iterate over.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from .errors import DSLParseError
from .naming import upper_first
from .references import normalize_type
from ..logging_config import get_logger

logger = get_logger(__name__)


class DSLEntityType(str, Enum):
    """Entity types produced by the DSL parser."""

    DATATYPE = "datatype"
    ENUM = "enum"
    METHOD = "method"
    CONTROLLER = "controller"
    COMMENT = "comment"


# Parser option presets, passed through to the parser untouched
CONFIG_CONFIGURATION: Dict[str, Any] = {
    "types": True,
    "enums": True,
    "config": True,
}

DATATYPE_CONFIGURATION: Dict[str, Any] = {
    "types": True,
    "enums": True,
}

METHOD_CONFIGURATION: Dict[str, Any] = {
    "types": False,
    "enums": False,
    "methods": True,
    "controllers": True,
    "rest": False,
}

NATIVE_ANNOTATION = "@native"


@dataclass
class DSLParseResult:
    """Outcome of parsing one source block."""

    entities: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@runtime_checkable
class DSLParser(Protocol):
    """Interface of the external DSL parser."""

    def parse(self, code: str, options: Dict[str, Any]) -> DSLParseResult:
        ...


def parse_source(
    parser: Optional[DSLParser],
    code: str,
    configuration: Dict[str, Any],
    valid_types: Optional[List[str]] = None,
) -> List[Dict[str, Any]]:
    """
    Parse a source block into entities.

    Args:
        parser: DSL parser collaborator
        code: Source text
        configuration: One of the option presets
        valid_types: Extra type names the parser should accept

    Returns:
        Parsed entities, in source order

    Raises:
        DSLParseError: If no parser is configured or parsing fails
    """
    if parser is None:
        raise DSLParseError("No DSL parser configured - cannot parse source code")

    options = {
        **configuration,
        "valid_types": list(valid_types or []),
        "ignore_semantics": True,
    }

    try:
        result = parser.parse(code, options)
    except DSLParseError:
        logger.warning("Failed to parse source code:\n\n----\n%s", code)
        raise
    except Exception as e:
        logger.warning("Failed to parse source code: %s\n\n----\n%s", e, code)
        raise DSLParseError(f"Failed to parse source code: {e}") from e

    if result.errors:
        logger.warning("Failed to parse source code:\n\n----\n%s", code)
        raise DSLParseError(f"Failed to parse source code: {', '.join(map(str, result.errors))}")

    return list(result.entities or [])


def reshape_entities(entities: List[Dict[str, Any]], base_name: str) -> List[Dict[str, Any]]:
    """
    Group loose methods into a controller and namespace the controllers.

    Methods declared outside a controller are hoisted into a synthetic
    controller named ``base_name`` which is appended after the other
    entities. Controllers without a namespace get ``base_name``.
    """
    methods = [entity for entity in entities if _type_of(entity) == DSLEntityType.METHOD]

    remaining = []
    for entity in entities:
        entity_type = _type_of(entity)
        if entity_type == DSLEntityType.METHOD:
            continue
        if entity_type == DSLEntityType.CONTROLLER:
            entity = {**entity, "namespace": entity.get("namespace") or base_name}
        remaining.append(entity)

    if methods:
        remaining.append(
            {
                "type": DSLEntityType.CONTROLLER.value,
                "name": base_name,
                "path": "/",
                "methods": methods,
            }
        )

    return remaining


def parse_entities(code: str, parser: DSLParser) -> List[Dict[str, Any]]:
    """Parse data type source and keep only the data types and enums."""
    entities = parse_source(parser, code, DATATYPE_CONFIGURATION)
    return [entity for entity in entities if is_data_entity(entity)]


def is_data_entity(entity: Any) -> bool:
    return _type_of(entity) in (DSLEntityType.DATATYPE, DSLEntityType.ENUM)


def is_native(entity: Any) -> bool:
    """Check for the ``@Native`` annotation marking externally provided types."""
    if not isinstance(entity, Mapping):
        return False
    for annotation in entity.get("annotations") or []:
        name = annotation.get("type") if isinstance(annotation, Mapping) else annotation
        if isinstance(name, str) and name.lower() == NATIVE_ANNOTATION:
            return True
    return False


def type_has_reference(entity: Any, type_ref: str) -> bool:
    """Check whether any property of a data type entity refers to ``type_ref``."""
    if _type_of(entity) != DSLEntityType.DATATYPE:
        return False

    for prop in entity.get("properties") or []:
        if not isinstance(prop, Mapping):
            continue
        if type_ref in normalize_type(_dsl_type_string(prop.get("type"))):
            return True
    return False


def controller_name(entity: Any) -> str:
    """Class name of a controller, qualified by its namespace when they differ."""
    if isinstance(entity, Mapping):
        name = entity.get("name") or ""
        namespace = entity.get("namespace")
    else:
        name = getattr(entity, "name", "") or ""
        namespace = getattr(entity, "namespace", None)

    if namespace and namespace.lower() != name.lower():
        return f"{upper_first(namespace)}{upper_first(name)}"
    return upper_first(name)


def _dsl_type_string(dsl_type: Any) -> str:
    """Render a parsed DSL type (string or structured) back to reference syntax."""
    if not dsl_type:
        return ""
    if isinstance(dsl_type, str):
        return dsl_type
    if not isinstance(dsl_type, Mapping):
        return str(dsl_type)

    text = dsl_type.get("name") or ""
    generics = dsl_type.get("generics") or []
    if generics:
        text += "<" + ",".join(_dsl_type_string(arg) for arg in generics) + ">"
    if dsl_type.get("list"):
        text += "[]"
    return text


def _type_of(entity: Any) -> Optional[str]:
    if not isinstance(entity, Mapping):
        return None
    return entity.get("type")
