"""
Splitting of rendered template output into files.

A rendered template is one text blob. Lines containing ``#FILENAME:``
start a new file::

    #FILENAME:<filename>[:<mode>[:<permissions>]]

Everything before the first directive belongs to a file named after
the template itself. Segments marked ``skip`` and segments containing
only whitespace are dropped.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .models import DEFAULT_PERMISSIONS, FileMode, GeneratedFile
from ..logging_config import get_logger

logger = get_logger(__name__)

FILENAME_MARKER = "#FILENAME:"

_MODE_PATTERN = re.compile(r"\b(merge|create-only|write-always|skip)\b")

# Octal file mode, e.g. 644 or 0755
_PERMISSIONS_PATTERN = re.compile(r"^[0-7]{3,4}$")

PostProcessor = Callable[[str, str], str]


def parse_mode(token: Optional[str]) -> FileMode:
    """Resolve a directive mode token; unknown or missing tokens mean write-always."""
    if not token:
        return FileMode.WRITE_ALWAYS
    match = _MODE_PATTERN.search(token)
    if not match:
        return FileMode.WRITE_ALWAYS
    return FileMode(match.group(1))


@dataclass
class Segment:
    """File currently being accumulated."""

    filename: str
    mode: FileMode = FileMode.WRITE_ALWAYS
    permissions: str = DEFAULT_PERMISSIONS
    lines: List[str] = field(default_factory=list)

    @property
    def is_blank(self) -> bool:
        return not any(line.strip() for line in self.lines)


class DirectiveParser:
    """
    State machine turning rendered lines into GeneratedFile records.

    States are the open segment; the transitions are ``feed`` of a content
    line (append), ``feed`` of a directive (flush, then open a new
    segment) and ``finish`` (flush the last segment).
    """

    def __init__(self, default_filename: str, post_process: Optional[PostProcessor] = None):
        """
        Initialize parser.

        Args:
            default_filename: Name of the segment preceding the first directive
            post_process: Applied to each retained file body
        """
        self._post_process = post_process or (lambda filename, code: code)
        self._segment = Segment(default_filename)
        self._files: List[GeneratedFile] = []

    def feed(self, line: str):
        """Consume one line of rendered output."""
        if FILENAME_MARKER not in line:
            self._segment.lines.append(line)
            return

        header = line.split(FILENAME_MARKER, 1)[1]
        if not header.strip():
            logger.warning("Invalid file header format in line: %s", line)
            return

        self._flush()
        self._segment = self._open(header)

    def finish(self) -> List[GeneratedFile]:
        """Flush the open segment and return every retained file."""
        self._flush()
        return list(self._files)

    def _open(self, header: str) -> Segment:
        fields = [value.strip() for value in header.split(":")]
        filename = fields[0]
        mode = parse_mode(fields[1] if len(fields) > 1 else None)
        permissions = fields[2] if len(fields) > 2 and fields[2] else DEFAULT_PERMISSIONS
        if not _PERMISSIONS_PATTERN.match(permissions):
            logger.warning(
                "Invalid permissions %r for %s, using %s", permissions, filename, DEFAULT_PERMISSIONS
            )
            permissions = DEFAULT_PERMISSIONS
        return Segment(filename, mode, permissions)

    def _flush(self):
        segment = self._segment

        if segment.mode == FileMode.SKIP:
            logger.debug("Skipping %s", segment.filename)
            return

        if segment.is_blank:
            return

        content = "\n".join(segment.lines)
        self._files.append(
            GeneratedFile(
                filename=segment.filename,
                content=self._post_process(segment.filename, content),
                mode=segment.mode,
                permissions=segment.permissions,
            )
        )


def split_files(
    default_filename: str, source_code: str, post_process: Optional[PostProcessor] = None
) -> List[GeneratedFile]:
    """
    Split rendered output into files.

    Args:
        default_filename: Name used for content before the first directive
        source_code: Rendered template output
        post_process: Optional hook applied to each file body

    Returns:
        Files in the order they appear in the output
    """
    parser = DirectiveParser(default_filename, post_process)
    for line in source_code.split("\n"):
        parser.feed(line)
    return parser.finish()
