"""
Naming utilities for template helpers and code formatters.

Handles word splitting, case conversions and reserved word conflicts
for the different target languages.
"""

import re
from typing import Set, List, Optional
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""
    SNAKE_CASE = "snake"      # user_name
    CAMEL_CASE = "camel"      # userName
    PASCAL_CASE = "pascal"    # UserName
    KEBAB_CASE = "kebab"      # user-name
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


_ACRONYM_BOUNDARY = re.compile(r'([A-Z]+)([A-Z][a-z])')
_CASE_BOUNDARY = re.compile(r'([a-z0-9])([A-Z])')
_WORD = re.compile(r'[A-Za-z0-9]+')


def split_words(value: Optional[str]) -> List[str]:
    """
    Split a name into its words.

    Separators, camel humps and acronym boundaries all start a new word,
    so ``"HTTPServer_config-id"`` becomes ``["HTTP", "Server", "config", "id"]``.
    """
    if not value:
        return []
    text = _CASE_BOUNDARY.sub(r'\1 \2', str(value))
    text = _ACRONYM_BOUNDARY.sub(r'\1 \2', text)
    return _WORD.findall(text)


def upper_first(value: Optional[str]) -> str:
    """Upper-case the first character, leave the rest untouched."""
    if not value:
        return ''
    value = str(value)
    return value[:1].upper() + value[1:]


def lower_first(value: Optional[str]) -> str:
    """Lower-case the first character, leave the rest untouched."""
    if not value:
        return ''
    value = str(value)
    return value[:1].lower() + value[1:]


def to_snake_case(value: Optional[str]) -> str:
    """Convert to snake_case."""
    return '_'.join(word.lower() for word in split_words(value))


def to_kebab_case(value: Optional[str]) -> str:
    """Convert to kebab-case."""
    return '-'.join(word.lower() for word in split_words(value))


def to_camel_case(value: Optional[str]) -> str:
    """Convert to camelCase."""
    words = split_words(value)
    if not words:
        return ''
    return words[0].lower() + ''.join(word.capitalize() for word in words[1:])


def to_pascal_case(value: Optional[str]) -> str:
    """Convert to PascalCase."""
    return upper_first(to_camel_case(value))


def to_screaming_snake_case(value: Optional[str]) -> str:
    """Convert to SCREAMING_SNAKE_CASE."""
    return to_snake_case(value).upper()


def convert_case(value: Optional[str], target_case: NamingCase) -> str:
    """Convert a name to the given case style."""
    if target_case == NamingCase.SNAKE_CASE:
        return to_snake_case(value)
    elif target_case == NamingCase.CAMEL_CASE:
        return to_camel_case(value)
    elif target_case == NamingCase.PASCAL_CASE:
        return to_pascal_case(value)
    elif target_case == NamingCase.KEBAB_CASE:
        return to_kebab_case(value)
    elif target_case == NamingCase.SCREAMING_SNAKE:
        return to_screaming_snake_case(value)
    else:
        return value or ''


class NameSanitizer:
    """
    Makes names safe for use as identifiers in a target language.

    Unlike a symbol table it keeps no record of names handed out, so one
    instance can be shared by any number of formatters and threads.
    """

    def __init__(self, reserved_words: Set[str] = None, builtin_types: Set[str] = None):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin type names that might conflict
        """
        self.reserved_words = reserved_words or set()
        self.builtin_types = builtin_types or set()

    def sanitize_name(self, name: str, target_case: NamingCase = NamingCase.SNAKE_CASE,
                      suffix_on_conflict: str = "_") -> str:
        """
        Sanitize a name for safe use in target language.

        Args:
            name: Original name to sanitize
            target_case: Desired case style
            suffix_on_conflict: Suffix to add when the name is reserved

        Returns:
            Sanitized name safe for use
        """
        converted = convert_case(self._clean_basic(name), target_case)

        if converted and converted[0].isdigit():
            converted = f"_{converted}"

        if self.is_reserved(converted):
            converted = f"{converted}{suffix_on_conflict}"

        return converted

    def is_reserved(self, name: str) -> bool:
        """Check a name against reserved words and builtin names."""
        return name in self.reserved_words

    def is_builtin(self, name: str) -> bool:
        """Check whether a name is a builtin type of the language."""
        return name in self.builtin_types

    def _clean_basic(self, name: str) -> str:
        """Basic name cleanup - remove invalid characters."""
        cleaned = re.sub(r'[^a-zA-Z0-9_-]', '_', str(name or ''))
        cleaned = cleaned.strip('_-')
        if not cleaned:
            cleaned = "value"
        return cleaned
