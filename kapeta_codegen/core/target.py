"""
Base target for all code generation languages.

A target owns a ``templates/`` directory with one template set per kind
(``templates/<namespace>/<name>/...``). Generating renders every template
of the requested kind and splits the output into files.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .directives import split_files
from .dsl import DSLParser
from .errors import ConfigurationError, RenderError, UnsupportedOperationError
from .formatter import CodeFormatter
from .kinds import KindUri
from .models import GeneratedAsset, GeneratedFile, SourceFile
from .postprocess import tidy_code
from .templates import TemplateEngine, clone_data, create_template_engine
from ..logging_config import get_logger

logger = get_logger(__name__)

TEMPLATES_DIR = "templates"


def read_template(path: Path) -> str:
    """Read a template file; undecodable bytes become U+FFFD."""
    return path.read_text(encoding="utf-8", errors="replace")


def walk_directory(directory: Path) -> List[Path]:
    """Every file below ``directory``, depth first, entries sorted by name."""
    results: List[Path] = []
    for entry in sorted(directory.iterdir(), key=lambda path: path.name):
        if entry.is_dir():
            results.extend(walk_directory(entry))
        else:
            results.append(entry)
    return results


class Target:
    """
    Base class of all code generation targets.

    Subclass it to implement a new language target: point it at a base
    directory holding the templates, give it the language's formatter and
    override the hooks as needed.
    """

    def __init__(
        self,
        options: Optional[Dict[str, Any]],
        base_dir: Union[str, Path],
        formatter: Optional[CodeFormatter] = None,
        dsl_parser: Optional[DSLParser] = None,
        autoescape: bool = False,
    ):
        """
        Initialize target.

        Args:
            options: Target options, available to templates as ``options``
            base_dir: Directory containing ``templates/``
            formatter: Formatter of the target language
            dsl_parser: Parser for embedded DSL source blocks
            autoescape: Enable Jinja2 autoescaping of expressions
        """
        self.options = options or {}
        self._base_dir = Path(base_dir)
        self._formatter = formatter or CodeFormatter()
        self._dsl_parser = dsl_parser
        self._autoescape = autoescape

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    @property
    def formatter(self) -> CodeFormatter:
        return self._formatter

    def _create_template_engine(self, data: Any, context: Any) -> TemplateEngine:
        return create_template_engine(
            data, context, self._formatter, self._dsl_parser, autoescape=self._autoescape
        )

    def _render(
        self,
        template_engine: TemplateEngine,
        source_file: str,
        template_source: str,
        data: Any,
        context: Any,
    ) -> str:
        """
        Render one template file.

        Override this method to change the templating engine.

        Raises:
            RenderError: With the template path and the underlying error
        """
        try:
            return template_engine.render_string(
                template_source,
                {
                    "options": self.options,
                    "data": data,
                    "context": context,
                },
            )
        except Exception as e:
            logger.error("Failed to render %s: %s", source_file, e)
            raise RenderError(
                f"Failed to compile source: {source_file}. {type(e).__name__}: {e}",
                template_path=source_file,
            ) from e

    def _post_process_code(self, filename: str, code: str) -> str:
        """
        Called for all code that has been generated.

        Override to post-process the generated code, e.g. run a formatter.
        """
        return code

    def generate(self, data: Any, context: Any) -> List[GeneratedFile]:
        """
        Generate source files for a blob of data with a ``kind`` property.

        Nothing is written to disk.

        Args:
            data: Render data, must contain ``kind``
            context: Document context

        Returns:
            Generated files in template order

        Raises:
            ConfigurationError: If the kind is missing or has no templates
            RenderError: If any template fails
        """
        kind = data.get("kind") if isinstance(data, Mapping) else None
        if not kind:
            raise ConfigurationError(f"No template found for kind: {kind}")

        template = KindUri.parse(kind).full_name
        if not template:
            raise ConfigurationError(f"No template found for kind: {kind}")

        root_template_dir = self._base_dir / TEMPLATES_DIR
        kind_template_dir = root_template_dir / template

        if not kind_template_dir.is_dir():
            raise ConfigurationError(
                f'Template not found "{kind_template_dir}" for kind: {kind}'
            )

        template_engine = self._create_template_engine(data, context)

        for file in walk_directory(root_template_dir):
            partial_id = file.relative_to(root_template_dir).as_posix()
            template_engine.register_partial(partial_id, read_template(file))

        out: List[GeneratedFile] = []

        for file in walk_directory(kind_template_dir):
            filename = file.relative_to(kind_template_dir).as_posix()
            logger.debug("Rendering %s", filename)

            # Each template gets its own copy in case it changes the data
            source_code = self._render(
                template_engine,
                str(file),
                read_template(file),
                clone_data(data),
                context,
            )

            out.extend(split_files(filename, source_code, self._post_process_code))

        logger.info("Generated %d file(s) for kind %s", len(out), kind)
        return out

    async def preprocess(self, data: Any) -> Any:
        """Transform data before generation."""
        return data

    async def postprocess(self, target_dir: Union[str, Path], files: List[GeneratedAsset]):
        """Called after generated files have been written to ``target_dir``."""
        pass

    def merge_file(
        self,
        source_file: SourceFile,
        target_file: GeneratedFile,
        last_file: Optional[GeneratedFile],
    ) -> GeneratedFile:
        """
        Merge a freshly generated file into an existing one.

        Targets supporting ``merge`` mode files must override this.

        Raises:
            UnsupportedOperationError: Always, in the base target
        """
        raise UnsupportedOperationError(
            f"Could not merge changes for file: {source_file.filename}. Merge not supported."
        )


class TidyTarget(Target):
    """Target that tidies whitespace of every generated file."""

    def _post_process_code(self, filename: str, code: str) -> str:
        return tidy_code(filename, code)
