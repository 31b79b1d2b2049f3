"""
Kapeta code generation.

Renders the template set of a kind into source files, each with its own
write mode and permissions.
"""

__version__ = "0.1.0"

from .core import (
    CodeFormatter,
    ConfigurationError,
    DSLParseError,
    DSLParser,
    DSLParseResult,
    FileMode,
    GeneratedAsset,
    GeneratedFile,
    GeneratorError,
    RenderError,
    SourceFile,
    Target,
    TargetConfig,
    TemplateEngine,
    TidyTarget,
    UnsupportedOperationError,
    load_target_config,
)
from .registry import (
    FormatterRegistry,
    create_target,
    get_formatter,
    list_supported_languages,
    register_formatter,
)
from .writer import generate_to_directory, write_files

__all__ = [
    "__version__",
    "Target",
    "TidyTarget",
    "TemplateEngine",
    "CodeFormatter",
    "GeneratedFile",
    "GeneratedAsset",
    "SourceFile",
    "FileMode",
    "DSLParser",
    "DSLParseResult",
    "TargetConfig",
    "load_target_config",
    "FormatterRegistry",
    "create_target",
    "get_formatter",
    "list_supported_languages",
    "register_formatter",
    "generate_to_directory",
    "write_files",
    "GeneratorError",
    "ConfigurationError",
    "RenderError",
    "DSLParseError",
    "UnsupportedOperationError",
]
