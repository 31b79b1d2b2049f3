"""
Python target support.

Provides the Python code formatter and Python naming rules.
"""

from .formatter import PythonCodeFormatter
from .naming import PYTHON_BUILTIN_TYPES, PYTHON_RESERVED_WORDS, create_python_sanitizer

__all__ = [
    "PythonCodeFormatter",
    "PYTHON_BUILTIN_TYPES",
    "PYTHON_RESERVED_WORDS",
    "create_python_sanitizer",
]
