"""
Command line interface for kapeta_codegen.

Renders a target's templates for a data document and either lists or
writes the generated files.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

from . import __version__
from .core.config import load_target_config
from .core.errors import GeneratorError
from .logging_config import configure_logging, get_logger
from .registry import create_target, get_registry
from .utils import load_document_source
from .writer import generate_to_directory

logger = get_logger(__name__)

console = Console()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="kapeta-codegen",
        description="Generate source files from kind templates",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", metavar="FILE", type=Path, help="Also write the log to FILE")

    subparsers = parser.add_subparsers(dest="command")

    generate = subparsers.add_parser("generate", help="Render templates for a data document")
    generate.add_argument("base_dir", nargs="?", help="Directory containing templates/")
    generate.add_argument(
        "--data", "-d", required=True, metavar="FILE|URL", help="Data document (JSON or YAML) with a kind"
    )
    generate.add_argument(
        "--context", "-c", metavar="FILE|URL", help="Context document (defaults to the data document)"
    )
    generate.add_argument("--output", "-o", metavar="DIR", help="Write generated files to DIR")
    generate.add_argument("--language", "-l", metavar="NAME", help="Formatter language (see 'languages')")
    generate.add_argument("--config", metavar="FILE", help="JSON configuration file for the target")
    generate.add_argument("--tidy", action="store_true", default=None, help="Tidy whitespace of generated files")
    generate.add_argument("--dry-run", action="store_true", help="List generated files without writing them")

    subparsers.add_parser("languages", help="List supported formatter languages")

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Entry point of the ``kapeta-codegen`` command.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, log_file=args.log_file)

    if args.command == "languages":
        return _list_languages()

    if args.command == "generate":
        try:
            return _generate(args)
        except GeneratorError as e:
            console.print(f"[red]✗ Error:[/red] {e}")
            logger.debug("Generation failed", exc_info=True)
            return 1

    parser.print_help()
    return 1


def _list_languages() -> int:
    table = Table(title="Supported languages", box=box.SIMPLE)
    table.add_column("Language", style="cyan")
    table.add_column("Aliases")

    for language, names in get_registry().list_all_names().items():
        table.add_row(language, ", ".join(names[1:]))

    console.print(table)
    return 0


def _generate(args: Any) -> int:
    config = load_target_config(
        args.config,
        base_dir=args.base_dir,
        language=args.language,
        tidy=args.tidy,
    )
    target = create_target(config)

    data_source, data = load_document_source(args.data)
    if args.context:
        _, context = load_document_source(args.context)
    else:
        context = data

    logger.info("Generating from %s", data_source)

    if args.dry_run or not args.output:
        files = target.generate(data, context)
        _print_files(files)
        return 0

    assets = asyncio.run(generate_to_directory(target, data, context, args.output))
    _print_files(assets)
    console.print(f"[green]✓[/green] Wrote {len(assets)} file(s) to {args.output}")
    return 0


def _print_files(files: list) -> None:
    table = Table(box=box.SIMPLE)
    table.add_column("File", style="cyan")
    table.add_column("Mode")
    table.add_column("Permissions", justify="right")

    for file in files:
        table.add_row(file.filename, str(file.mode), file.permissions)

    console.print(table)


if __name__ == "__main__":
    sys.exit(main())
