"""Tests for the target orchestrator.

Covers:
- Template lookup by kind and its error cases
- Template order, partials and directive splitting
- Data isolation between template files
- Render error wrapping
- Post-processing hooks and TidyTarget
- Async pre/post-processing and merge support
"""

from __future__ import annotations

from pathlib import Path

import pytest
from jinja2.exceptions import TemplateSyntaxError

from kapeta_codegen.core.errors import (
    ConfigurationError,
    DSLParseError,
    RenderError,
    UnsupportedOperationError,
)
from kapeta_codegen.core.models import FileMode, GeneratedFile, SourceFile
from kapeta_codegen.core.target import Target, TidyTarget, walk_directory
from kapeta_codegen.languages import GoCodeFormatter


pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# walk_directory
# ---------------------------------------------------------------------------


class TestWalkDirectory:
    def test_sorted_depth_first(self, tmp_path):
        for relative in ["z.txt", "b/d.txt", "b/c.txt", "a.txt"]:
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")

        files = [p.relative_to(tmp_path).as_posix() for p in walk_directory(tmp_path)]

        assert files == ["a.txt", "b/c.txt", "b/d.txt", "z.txt"]


# ---------------------------------------------------------------------------
# Template lookup
# ---------------------------------------------------------------------------


class TestTemplateLookup:
    def test_merge_mode_pom(self, make_templates, data, context):
        base_dir = make_templates(
            {
                "kapeta/test/pom.xml": (
                    "#FILENAME:pom.xml:merge\n<project>{{ data.metadata.name }}</project>\n"
                )
            }
        )

        files = Target({}, base_dir).generate(data, context)

        assert files == [
            GeneratedFile("pom.xml", "<project>users</project>\n", FileMode.MERGE, "644")
        ]

    def test_missing_kind(self, make_templates, context):
        base_dir = make_templates({"kapeta/test/a.txt": "A"})

        with pytest.raises(ConfigurationError, match="No template found for kind"):
            Target({}, base_dir).generate({"metadata": {}}, context)

    def test_missing_template_directory_names_path(self, make_templates, context):
        base_dir = make_templates({"kapeta/test/a.txt": "A"})
        expected = str(base_dir / "templates" / "kapeta" / "missing")

        with pytest.raises(ConfigurationError) as exc_info:
            Target({}, base_dir).generate({"kind": "kapeta/missing:1.0.0"}, context)

        assert expected in str(exc_info.value)
        assert "kapeta/missing:1.0.0" in str(exc_info.value)

    def test_kind_is_case_insensitive(self, make_templates, context):
        base_dir = make_templates({"kapeta/test/a.txt": "A"})

        files = Target({}, base_dir).generate({"kind": "Kapeta/Test"}, context)

        assert [f.filename for f in files] == ["a.txt"]

    def test_missing_context(self, make_templates, data):
        base_dir = make_templates({"kapeta/test/a.txt": "A"})

        with pytest.raises(ConfigurationError, match="Missing context"):
            Target({}, base_dir).generate(data, None)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


class TestGenerate:
    def test_template_order_and_nested_names(self, make_templates, data, context):
        base_dir = make_templates(
            {
                "kapeta/test/z.txt": "#FILENAME:z1.txt\nZ1\n#FILENAME:z2.txt\nZ2",
                "kapeta/test/b/c.txt": "C",
                "kapeta/test/a.txt": "A",
            }
        )

        files = Target({}, base_dir).generate(data, context)

        assert [f.filename for f in files] == ["a.txt", "b/c.txt", "z1.txt", "z2.txt"]

    def test_generation_is_deterministic(self, make_templates, data, context):
        base_dir = make_templates(
            {
                "kapeta/test/a.txt": "{{ data.metadata.name }}",
                "kapeta/test/b.txt": "{{ type('user') }}",
            }
        )
        target = Target({}, base_dir)

        assert target.generate(data, context) == target.generate(data, context)

    def test_options_are_available(self, make_templates, data, context):
        base_dir = make_templates({"kapeta/test/a.txt": "{{ options.package }}"})

        files = Target({"package": "com.example"}, base_dir).generate(data, context)

        assert files[0].content == "com.example"

    def test_partials_from_whole_templates_tree(self, make_templates, data, context):
        base_dir = make_templates(
            {
                "shared/header.txt": "HEADER {{ data.metadata.name }}\n",
                "kapeta/test/a.txt": "{% include 'shared/header.txt' %}\nbody",
            }
        )

        files = Target({}, base_dir).generate(data, context)

        assert files[0].content == "HEADER users\nbody"

    def test_templates_of_other_kinds_are_not_rendered(self, make_templates, data, context):
        base_dir = make_templates(
            {
                "kapeta/other/o.txt": "other",
                "kapeta/test/a.txt": "A",
            }
        )

        files = Target({}, base_dir).generate(data, context)

        assert [f.filename for f in files] == ["a.txt"]

    def test_binary_file_in_other_kind(self, make_templates, data, context):
        base_dir = make_templates({"kapeta/test/a.txt": "A"})
        logo = base_dir / "templates" / "kapeta" / "other" / "logo.png"
        logo.parent.mkdir(parents=True)
        logo.write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe")

        files = Target({}, base_dir).generate(data, context)

        assert files == [GeneratedFile("a.txt", "A")]

    def test_undecodable_bytes_are_replaced(self, make_templates, data, context):
        base_dir = make_templates({})
        template = base_dir / "templates" / "kapeta" / "test" / "app.properties"
        template.parent.mkdir(parents=True)
        template.write_bytes("name=café\n".encode("latin-1"))

        files = Target({}, base_dir).generate(data, context)

        assert files[0].content == "name=caf�\n"

    def test_empty_output_produces_no_file(self, make_templates, data, context):
        base_dir = make_templates({"kapeta/test/a.txt": "{# nothing #}"})

        assert Target({}, base_dir).generate(data, context) == []

    def test_data_is_cloned_per_template(self, make_templates, data, context):
        base_dir = make_templates(
            {
                "kapeta/test/a.txt": (
                    "{% set _ = data.metadata.update({'name': 'changed'}) %}"
                    "{{ data.metadata.name }}"
                ),
                "kapeta/test/b.txt": "{{ data.metadata.name }}",
            }
        )

        files = Target({}, base_dir).generate(data, context)

        assert [f.content for f in files] == ["changed", "users"]
        assert data["metadata"]["name"] == "users"

    def test_formatter_is_used(self, make_templates, data, context):
        base_dir = make_templates({"kapeta/test/a.go": "{{ variable('type') }}"})

        target = Target({}, base_dir, formatter=GoCodeFormatter())
        files = target.generate(data, context)

        assert files[0].content == "type_"
        assert isinstance(target.formatter, GoCodeFormatter)
        assert target.base_dir == Path(base_dir)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestRenderErrors:
    def test_syntax_error_names_template(self, make_templates, data, context):
        base_dir = make_templates({"kapeta/test/broken.txt": "{% if %}"})
        template_path = str(base_dir / "templates" / "kapeta" / "test" / "broken.txt")

        with pytest.raises(RenderError) as exc_info:
            Target({}, base_dir).generate(data, context)

        assert str(exc_info.value).startswith(f"Failed to compile source: {template_path}.")
        assert exc_info.value.template_path == template_path
        assert isinstance(exc_info.value.__cause__, TemplateSyntaxError)

    def test_helper_error_is_wrapped(self, make_templates, data, context):
        base_dir = make_templates({"kapeta/test/a.txt": "{{ kaplang_types(data.source) }}"})
        data["source"] = {"value": "type User {}"}

        with pytest.raises(RenderError) as exc_info:
            Target({}, base_dir).generate(data, context)

        assert isinstance(exc_info.value.__cause__, DSLParseError)

    def test_dsl_parser_is_passed_to_templates(self, make_templates, data, context, fake_parser):
        base_dir = make_templates(
            {"kapeta/test/a.txt": "{% for e in kaplang_types(data.source) %}{{ e.name }};{% endfor %}"}
        )
        data["source"] = {"value": "type User {}"}

        files = Target({}, base_dir, dsl_parser=fake_parser).generate(data, context)

        assert files[0].content == "User;Orders;users;"


# ---------------------------------------------------------------------------
# Hooks
# ---------------------------------------------------------------------------


class UpperTarget(Target):
    def _post_process_code(self, filename, code):
        return code.upper()


class TestHooks:
    def test_post_process_hook(self, make_templates, data, context):
        base_dir = make_templates({"kapeta/test/a.txt": "#FILENAME:a.java\nclass a {}"})

        files = UpperTarget({}, base_dir).generate(data, context)

        assert files[0].content == "CLASS A {}"

    def test_tidy_target(self, make_templates, data, context):
        base_dir = make_templates(
            {
                "kapeta/test/a.txt": (
                    "#FILENAME:A.java\nclass A {   \n\n\n\n\n}\n"
                    "#FILENAME:README.md\nText   \n"
                )
            }
        )

        files = TidyTarget({}, base_dir).generate(data, context)

        assert files[0].content == "class A {\n\n\n}"
        assert files[1].content == "Text   \n"

    def test_merge_file_not_supported(self, tmp_path):
        target = Target({}, tmp_path)

        with pytest.raises(UnsupportedOperationError, match="Merge not supported"):
            target.merge_file(
                SourceFile("pom.xml", "<old/>"),
                GeneratedFile("pom.xml", "<new/>", FileMode.MERGE),
                None,
            )

    @pytest.mark.asyncio
    async def test_preprocess_returns_data(self, tmp_path, data):
        assert await Target({}, tmp_path).preprocess(data) is data

    @pytest.mark.asyncio
    async def test_postprocess_is_noop(self, tmp_path):
        assert await Target({}, tmp_path).postprocess(tmp_path, []) is None
