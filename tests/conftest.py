"""Shared pytest fixtures for the kapeta_codegen test suite.

Provides reusable fixtures for:
- Template directories built inside tmp_path
- A document context with consumers, providers and entities
- A scripted DSL parser standing in for the real one
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from kapeta_codegen.core.dsl import DSLParseResult


# ---------------------------------------------------------------------------
# DSL parser double
# ---------------------------------------------------------------------------


class FakeDSLParser:
    """DSL parser returning canned entities and recording every call."""

    def __init__(
        self,
        entities: list[dict[str, Any]] | None = None,
        errors: list[str] | None = None,
        exception: Exception | None = None,
    ) -> None:
        self.entities = entities or []
        self.errors = errors or []
        self.exception = exception
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def parse(self, code: str, options: dict[str, Any]) -> DSLParseResult:
        self.calls.append((code, options))
        if self.exception is not None:
            raise self.exception
        return DSLParseResult(entities=[dict(e) for e in self.entities], errors=list(self.errors))


@pytest.fixture
def dsl_entities() -> list[dict[str, Any]]:
    """Entities as the parser reports them for a mixed source block."""
    return [
        {
            "type": "datatype",
            "name": "User",
            "properties": [
                {"name": "id", "type": "string"},
                {"name": "orders", "type": {"name": "Order", "list": True}},
            ],
        },
        {"type": "method", "name": "getUser"},
        {"type": "controller", "name": "Orders", "methods": []},
        {"type": "method", "name": "deleteUser"},
    ]


@pytest.fixture
def fake_parser(dsl_entities) -> FakeDSLParser:
    return FakeDSLParser(entities=dsl_entities)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@pytest.fixture
def context() -> dict[str, Any]:
    """Block definition used as the document context."""
    return {
        "kind": "kapeta/block-type-service:1.0.0",
        "metadata": {"name": "users"},
        "spec": {
            "consumers": [
                {"kind": "kapeta/resource-type-mysql:1.0.0", "metadata": {"name": "db"}},
                {"kind": "kapeta/resource-type-redis:0.2.0", "metadata": {"name": "cache"}},
            ],
            "providers": [
                {"kind": "kapeta/resource-type-rest-api:0.1.0", "metadata": {"name": "users"}},
            ],
            "entities": {
                "types": [
                    {"type": "dto", "name": "User"},
                    {"type": "dto", "name": "order"},
                    {"type": "enum", "name": "Status"},
                ]
            },
        },
    }


@pytest.fixture
def data() -> dict[str, Any]:
    """Render data for the kapeta/test kind."""
    return {
        "kind": "kapeta://kapeta/test:local",
        "metadata": {"name": "users"},
        "spec": {},
    }


# ---------------------------------------------------------------------------
# Template directories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_templates(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write ``{relative path: content}`` below ``<base>/templates`` and return base."""
    base_dir = tmp_path / "target"

    def _make(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            path = base_dir / "templates" / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return base_dir

    return _make


@pytest.fixture
def make_parser() -> Callable[..., FakeDSLParser]:
    """Factory for parsers with custom entities, errors or exceptions."""
    return FakeDSLParser
