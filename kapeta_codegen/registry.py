"""
Formatter registry for target languages.

Maps language names and their aliases to CodeFormatter classes so
targets and the CLI can pick a naming strategy by name.
"""

from typing import Dict, Type, Optional, List

from .core.config import TargetConfig
from .core.dsl import DSLParser
from .core.errors import ConfigurationError, RegistryError
from .core.formatter import CodeFormatter
from .core.target import Target, TidyTarget


class FormatterRegistry:
    """Registry of available code formatters."""

    def __init__(self):
        """Initialize empty registry."""
        self._formatters: Dict[str, Type[CodeFormatter]] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        language: str,
        formatter_class: Type[CodeFormatter],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register a formatter for a language.

        Args:
            language: Primary language name (e.g., 'go', 'python')
            formatter_class: Class deriving from CodeFormatter
            aliases: Alternative names for this language
            replace: If True, replace existing registration. If False, skip if exists.

        Raises:
            RegistryError: If formatter class is invalid or an alias conflicts
        """
        if not isinstance(formatter_class, type) or not issubclass(formatter_class, CodeFormatter):
            raise RegistryError("Formatter class must inherit from CodeFormatter")

        language_key = language.lower()

        if language_key in self._formatters and not replace:
            return

        self._formatters[language_key] = formatter_class

        for alias in aliases or []:
            alias_key = alias.lower()

            if alias_key == language_key:
                continue

            if not replace:
                if alias_key in self._formatters:
                    raise RegistryError(
                        f"Alias '{alias}' conflicts with existing primary language"
                    )
                if alias_key in self._aliases and self._aliases[alias_key] != language_key:
                    raise RegistryError(
                        f"Alias '{alias}' already points to '{self._aliases[alias_key]}'"
                    )

            self._aliases[alias_key] = language_key

    def unregister(self, language: str):
        """Unregister a formatter and its aliases."""
        language_key = language.lower()
        self._formatters.pop(language_key, None)

        for alias in [a for a, target in self._aliases.items() if target == language_key]:
            del self._aliases[alias]

    def get_formatter_class(self, language: str) -> Type[CodeFormatter]:
        """
        Get formatter class for language.

        Raises:
            RegistryError: If language not found
        """
        language_key = language.lower()

        if language_key in self._formatters:
            return self._formatters[language_key]

        if language_key in self._aliases:
            return self._formatters[self._aliases[language_key]]

        raise RegistryError(
            f"No formatter registered for language: {language}. "
            f"Available: {', '.join(self.list_languages())}"
        )

    def create_formatter(self, language: str) -> CodeFormatter:
        """Create a formatter instance for language."""
        return self.get_formatter_class(language)()

    def list_languages(self) -> List[str]:
        """Get list of registered primary language names."""
        return sorted(self._formatters.keys())

    def get_aliases_for_language(self, language: str) -> List[str]:
        language_key = language.lower()
        return sorted(alias for alias, target in self._aliases.items() if target == language_key)

    def list_all_names(self) -> Dict[str, List[str]]:
        """Map each primary language to all of its names, aliases included."""
        return {
            language: [language] + self.get_aliases_for_language(language)
            for language in self.list_languages()
        }

    def is_supported(self, language: str) -> bool:
        language_key = language.lower()
        return language_key in self._formatters or language_key in self._aliases


# Global registry instance - created once
_global_registry: Optional[FormatterRegistry] = None


def get_registry() -> FormatterRegistry:
    """Get the global formatter registry, initializing if needed."""
    global _global_registry
    if _global_registry is None:
        _global_registry = FormatterRegistry()
        _auto_register_formatters(_global_registry)
    return _global_registry


def _auto_register_formatters(registry: FormatterRegistry):
    """Register the formatters shipped with the package."""
    from .languages.go import GoCodeFormatter
    from .languages.python import PythonCodeFormatter

    registry.register("default", CodeFormatter, aliases=["java", "typescript", "ts"])
    registry.register("go", GoCodeFormatter, aliases=["golang"])
    registry.register("python", PythonCodeFormatter, aliases=["py"])


def register_formatter(
    language: str,
    formatter_class: Type[CodeFormatter],
    aliases: Optional[List[str]] = None,
):
    """Register a formatter in the global registry."""
    get_registry().register(language, formatter_class, aliases)


def get_formatter(language: str) -> CodeFormatter:
    """Create a formatter instance from the global registry."""
    return get_registry().create_formatter(language)


def list_supported_languages() -> List[str]:
    """List all supported languages from global registry."""
    return get_registry().list_languages()


def create_target(config: TargetConfig, dsl_parser: Optional[DSLParser] = None) -> Target:
    """
    Create a target from configuration.

    Args:
        config: Target configuration, ``base_dir`` is required
        dsl_parser: Parser for embedded DSL source blocks

    Returns:
        Configured target instance

    Raises:
        ConfigurationError: If no base directory is configured
        RegistryError: If the language is unknown
    """
    if not config.base_dir:
        raise ConfigurationError("No base directory configured for target")

    target_class = TidyTarget if config.tidy else Target
    return target_class(
        config.options,
        config.base_dir,
        formatter=get_formatter(config.language),
        dsl_parser=dsl_parser,
        autoescape=config.autoescape,
    )
