"""
Exception types raised by the code generation engine.

Every error derives from GeneratorError so callers can catch a single
type around a full generation call.
"""


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class ConfigurationError(GeneratorError):
    """Raised for a missing kind, a missing template directory or bad config."""

    pass


class RenderError(GeneratorError):
    """Raised when a template fails to compile or render."""

    def __init__(self, message: str, template_path: str = None):
        super().__init__(message)
        self.template_path = template_path


class DSLParseError(GeneratorError):
    """Raised when an embedded source block cannot be parsed."""

    pass


class UnsupportedOperationError(GeneratorError):
    """Raised by extension points a target does not implement."""

    pass


class RegistryError(GeneratorError):
    """Exception raised for formatter registry errors."""

    pass


class DocumentLoadError(GeneratorError):
    """Exception raised when a data or context document cannot be loaded."""

    pass
