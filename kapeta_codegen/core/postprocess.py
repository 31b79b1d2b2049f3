"""
Post-processing of generated code.

Targets run every generated file body through a post-processing hook.
tidy_code is a light, language-neutral clean-up for targets that have no
real source formatter available.
"""

from typing import Tuple

# Prose files are left exactly as rendered
UNTOUCHED_EXTENSIONS: Tuple[str, ...] = (".md", ".txt")

MAX_BLANK_LINES = 2


def tidy_code(filename: str, code: str) -> str:
    """
    Strip trailing whitespace and collapse long runs of blank lines.

    Args:
        filename: Output filename, used to skip prose files
        code: Raw generated code

    Returns:
        Tidied code
    """
    if filename.lower().endswith(UNTOUCHED_EXTENSIONS):
        return code

    lines = code.split("\n")
    formatted_lines = []
    blank_count = 0

    for line in lines:
        stripped = line.rstrip()
        if not stripped:
            blank_count += 1
            if blank_count <= MAX_BLANK_LINES:
                formatted_lines.append("")
        else:
            blank_count = 0
            formatted_lines.append(stripped)

    return "\n".join(formatted_lines)
