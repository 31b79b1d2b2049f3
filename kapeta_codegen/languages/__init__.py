"""
Language-specific code formatters.

Each language package provides a CodeFormatter subclass and the naming
rules it relies on.
"""

from .go import GoCodeFormatter
from .python import PythonCodeFormatter

__all__ = ["GoCodeFormatter", "PythonCodeFormatter"]
