"""
Core code generation components.

Provides the target base class, the template engine and the utilities
used by all language targets.
"""

from .config import TargetConfig, load_target_config
from .directives import DirectiveParser, split_files
from .dsl import (
    DSLEntityType,
    DSLParser,
    DSLParseResult,
    parse_entities,
)
from .errors import (
    ConfigurationError,
    DSLParseError,
    GeneratorError,
    RenderError,
    UnsupportedOperationError,
)
from .formatter import CodeFormatter
from .kinds import KindUri, kind_matcher
from .models import FileMode, GeneratedAsset, GeneratedFile, SourceFile
from .naming import NameSanitizer, NamingCase
from .references import TypeReferenceResolver, has_type_reference, normalize_type
from .target import Target, TidyTarget
from .templates import TemplateEngine, create_template_engine

__all__ = [
    # Target
    "Target",
    "TidyTarget",
    "GeneratedFile",
    "GeneratedAsset",
    "SourceFile",
    "FileMode",
    "DirectiveParser",
    "split_files",
    # Template system
    "TemplateEngine",
    "create_template_engine",
    "CodeFormatter",
    "KindUri",
    "kind_matcher",
    "TypeReferenceResolver",
    "has_type_reference",
    "normalize_type",
    "NameSanitizer",
    "NamingCase",
    # DSL bridging
    "DSLEntityType",
    "DSLParser",
    "DSLParseResult",
    "parse_entities",
    # Configuration
    "TargetConfig",
    "load_target_config",
    # Errors
    "GeneratorError",
    "ConfigurationError",
    "RenderError",
    "DSLParseError",
    "UnsupportedOperationError",
]
