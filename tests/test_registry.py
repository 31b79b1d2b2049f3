"""Tests for the formatter registry and target creation.

Covers:
- Registration, aliases and conflicts
- Global registry defaults
- create_target from configuration
"""

from __future__ import annotations

import pytest

from kapeta_codegen.core.config import TargetConfig
from kapeta_codegen.core.errors import ConfigurationError, RegistryError
from kapeta_codegen.core.formatter import CodeFormatter
from kapeta_codegen.core.target import Target, TidyTarget
from kapeta_codegen.languages import GoCodeFormatter, PythonCodeFormatter
from kapeta_codegen.registry import (
    FormatterRegistry,
    create_target,
    get_formatter,
    get_registry,
    list_supported_languages,
)


pytestmark = pytest.mark.unit


class UpperFormatter(CodeFormatter):
    def type(self, value):
        return super().type(value).upper()


# ---------------------------------------------------------------------------
# FormatterRegistry
# ---------------------------------------------------------------------------


class TestFormatterRegistry:
    @pytest.fixture
    def registry(self):
        registry = FormatterRegistry()
        registry.register("upper", UpperFormatter, aliases=["up", "UPPER"])
        return registry

    def test_lookup_by_name_and_alias(self, registry):
        assert registry.get_formatter_class("upper") is UpperFormatter
        assert registry.get_formatter_class("UP") is UpperFormatter
        assert isinstance(registry.create_formatter("up"), UpperFormatter)

    def test_unknown_language(self, registry):
        with pytest.raises(RegistryError, match="Available: upper"):
            registry.get_formatter_class("cobol")

    def test_rejects_non_formatter(self, registry):
        with pytest.raises(RegistryError):
            registry.register("bad", dict)

    def test_existing_registration_is_kept(self, registry):
        registry.register("upper", CodeFormatter)

        assert registry.get_formatter_class("upper") is UpperFormatter

    def test_replace(self, registry):
        registry.register("upper", CodeFormatter, replace=True)

        assert registry.get_formatter_class("upper") is CodeFormatter

    def test_alias_conflicts(self, registry):
        with pytest.raises(RegistryError, match="already points to"):
            registry.register("other", CodeFormatter, aliases=["up"])

        with pytest.raises(RegistryError, match="conflicts with existing primary"):
            registry.register("another", CodeFormatter, aliases=["upper"])

    def test_unregister(self, registry):
        registry.unregister("upper")

        assert not registry.is_supported("upper")
        assert not registry.is_supported("up")

    def test_list_names(self, registry):
        registry.register("plain", CodeFormatter)

        assert registry.list_languages() == ["plain", "upper"]
        assert registry.list_all_names() == {"plain": ["plain"], "upper": ["upper", "up"]}


# ---------------------------------------------------------------------------
# Global registry
# ---------------------------------------------------------------------------


class TestGlobalRegistry:
    def test_registry_is_shared(self):
        assert get_registry() is get_registry()

    @pytest.mark.parametrize(
        "name, formatter_class",
        [
            ("default", CodeFormatter),
            ("java", CodeFormatter),
            ("ts", CodeFormatter),
            ("go", GoCodeFormatter),
            ("golang", GoCodeFormatter),
            ("python", PythonCodeFormatter),
            ("PY", PythonCodeFormatter),
        ],
    )
    def test_builtin_formatters(self, name, formatter_class):
        assert type(get_formatter(name)) is formatter_class

    def test_supported_languages(self):
        assert {"default", "go", "python"} <= set(list_supported_languages())


# ---------------------------------------------------------------------------
# create_target
# ---------------------------------------------------------------------------


class TestCreateTarget:
    def test_target_from_config(self, tmp_path):
        config = TargetConfig(base_dir=str(tmp_path), language="go", options={"a": 1})

        target = create_target(config)

        assert type(target) is Target
        assert isinstance(target.formatter, GoCodeFormatter)
        assert target.options == {"a": 1}
        assert target.base_dir == tmp_path

    def test_tidy_target(self, tmp_path):
        target = create_target(TargetConfig(base_dir=str(tmp_path), tidy=True))

        assert isinstance(target, TidyTarget)

    def test_missing_base_dir(self):
        with pytest.raises(ConfigurationError):
            create_target(TargetConfig())

    def test_unknown_language(self, tmp_path):
        with pytest.raises(RegistryError):
            create_target(TargetConfig(base_dir=str(tmp_path), language="cobol"))
