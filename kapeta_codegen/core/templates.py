"""
Template engine wrapper for code generation.

Builds an isolated Jinja2 environment per generation call with the
helper registry the templates rely on: casing, kind matching, code
formatting, structural iteration, type references and DSL bridging.

Block helpers are used with Jinja2's call blocks; the helper receives
the block as ``caller``::

    {% call(ref) eachTypeReference(data.spec, all=true) %}
    import {{ ref.name }};
    {% endcall %}

Conditional helpers return a boolean when called without a block so
the inverse branch can be written with ``{% else %}``.
"""

import copy
import json
import re
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, List, Optional

from jinja2 import DictLoader, Environment, Undefined, pass_context
from markupsafe import Markup

from . import dsl, kinds
from .errors import ConfigurationError
from .formatter import CodeFormatter
from .naming import (
    lower_first,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_snake_case,
    upper_first,
)
from .references import TypeReferenceResolver, has_type_reference
from ..logging_config import get_logger

logger = get_logger(__name__)

Helper = Callable[..., Any]

# Pure string helpers are also exposed as filters: {{ name | kebabCase }}
_FILTER_HELPERS = (
    "lowercase",
    "uppercase",
    "lowerFirst",
    "upperFirst",
    "kebab",
    "kebabCase",
    "snakeCase",
    "camelCase",
    "pascalCase",
    "dashify",
    "assetName",
    "json",
    "json_string",
    "toJSON",
    "type",
    "constant",
    "comment",
    "namespace",
    "variable",
    "string",
    "method",
    "returnType",
)


def _is_missing(value: Any) -> bool:
    return value is None or isinstance(value, Undefined)


def _text(value: Any) -> str:
    if _is_missing(value):
        return ""
    return str(value)


def _compare_text(value: Any) -> str:
    """Text used by switch/case; booleans compare as true/false."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return _text(value)


def _to_plain(value: Any) -> Any:
    """Make template values JSON serializable."""
    if _is_missing(value):
        return None
    return value


def _block_or_flag(matched: bool, caller: Optional[Callable], *args: Any) -> Any:
    """Render the block when matched, or return the flag when there is no block."""
    if caller is None:
        return matched
    if matched:
        return Markup(caller(*args))
    return Markup("")


class TemplateEngine:
    """
    Per-call Jinja2 environment bound to data, context and a formatter.

    Every instance owns its own helper registry, partials and switch
    state, so concurrent generation calls never share anything.
    """

    def __init__(
        self,
        data: Any,
        context: Any,
        formatter: Optional[CodeFormatter] = None,
        dsl_parser: Optional[dsl.DSLParser] = None,
        autoescape: bool = False,
    ):
        """
        Initialize template engine.

        Args:
            data: Render data of the generation call
            context: Document context (``spec.consumers``, ``spec.providers``, ...)
            formatter: Code formatter of the target language
            dsl_parser: Parser used by the ``kaplang_*`` helpers

        Raises:
            ConfigurationError: If data or context is missing
        """
        if data is None:
            raise ConfigurationError("Missing data")

        if context is None:
            raise ConfigurationError("Missing context")

        self.data = data
        self.context = context
        self.formatter = formatter or CodeFormatter()
        self.dsl_parser = dsl_parser

        self._partials: Dict[str, str] = {}
        self._switch_values: List[str] = []

        self._env = Environment(
            loader=DictLoader(self._partials),
            autoescape=autoescape,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

        self.helpers: Dict[str, Helper] = self._create_helpers()
        self._env.globals.update(self.helpers)
        for name in _FILTER_HELPERS:
            self._env.filters[name] = self.helpers[name]

    # Partials and rendering

    def register_partial(self, name: str, source: str):
        """
        Register a reusable template fragment.

        Args:
            name: Name used with ``{% include %}``
            source: Template source
        """
        logger.debug("Registering partial %s", name)
        self._partials[name] = source

    @property
    def partials(self) -> List[str]:
        return sorted(self._partials)

    def render_string(self, template_string: str, variables: Dict[str, Any]) -> str:
        """
        Render a template string.

        Args:
            template_string: Template content as string
            variables: Variables available inside the template

        Returns:
            Rendered content
        """
        template = self._env.from_string(template_string)
        return template.render(**variables)

    # Helper registry

    def _create_helpers(self) -> Dict[str, Helper]:
        helpers: Dict[str, Helper] = {}
        helpers.update(self._casing_helpers())
        helpers.update(self._misc_helpers())
        helpers.update(self._kind_helpers())
        helpers.update(self._formatting_helpers())
        helpers.update(self._structural_helpers())
        helpers.update(self._switch_helpers())
        helpers.update(self._type_reference_helpers())
        helpers.update(self._dsl_helpers())
        return helpers

    def _casing_helpers(self) -> Dict[str, Helper]:
        def asset_name(value):
            value = _text(value)
            if "/" not in value:
                return Markup(value)
            return Markup(value.split("/")[1])

        return {
            "lowercase": lambda value: Markup(_text(value).lower()),
            "uppercase": lambda value: Markup(_text(value).upper()),
            "lowerFirst": lambda value: Markup(lower_first(_text(value))),
            "upperFirst": lambda value: Markup(upper_first(_text(value))),
            "kebab": lambda value: Markup(to_kebab_case(_text(value))),
            "kebabCase": lambda value: Markup(to_kebab_case(_text(value))),
            "snakeCase": lambda value: Markup(to_snake_case(_text(value))),
            "camelCase": lambda value: Markup(to_camel_case(_text(value))),
            "pascalCase": lambda value: Markup(to_pascal_case(_text(value))),
            "dashify": lambda value: Markup(_text(value).replace("_", "-").replace("/", "-")),
            "assetName": asset_name,
        }

    def _misc_helpers(self) -> Dict[str, Helper]:
        def default(value, default_value=None):
            if _is_missing(value):
                return default_value
            return value

        def curly(open_brace=False):
            return "{" if open_brace else "}"

        def first(*values):
            for value in values:
                if not _is_missing(value) and value:
                    return value
            return ""

        def when(value, caller=None, **options):
            inner = caller() if caller is not None else ""
            when_true, _, when_false = str(inner).partition("||")
            if options.get("type") == value:
                return Markup(when_true)
            return Markup(when_false)

        def to_json(value, **kwargs):
            return json.dumps(_to_plain(value), ensure_ascii=False, **kwargs)

        return {
            "default": default,
            "json": lambda value: Markup(to_json(value, separators=(",", ":"))),
            "json_string": lambda value: Markup(
                json.dumps(to_json(value, separators=(",", ":")), ensure_ascii=False)
            ),
            "toJSON": lambda value: to_json(value, indent=4),
            "curly": curly,
            "concat": lambda a, b: _text(a) + _text(b),
            "toArray": lambda *values: list(values),
            "first": first,
            "when": when,
        }

    def _spec_list(self, name: str) -> Optional[List[Any]]:
        spec = None
        if isinstance(self.context, Mapping):
            spec = self.context.get("spec")
        if not isinstance(spec, Mapping):
            return None
        return spec.get(name)

    def _kind_helpers(self) -> Dict[str, Helper]:
        def matching(collection: str, kind: str, caller, joiner: str = "\n"):
            resources = kinds.filter_kinds(self._spec_list(collection), _text(kind))
            if caller is None:
                return resources
            return Markup(joiner.join(str(caller(resource)) for resource in resources))

        def consumes(kind, caller=None):
            return _block_or_flag(
                kinds.has_kind(self._spec_list("consumers"), _text(kind)), caller
            )

        def provides(kind, caller=None):
            return _block_or_flag(
                kinds.has_kind(self._spec_list("providers"), _text(kind)), caller
            )

        def consumers_of_type(kind, caller=None):
            return matching("consumers", kind, caller)

        def consumers_of_type_joined(kind, joiner, caller=None):
            return matching("consumers", kind, caller, _text(joiner))

        def providers_of_type(kind, caller=None):
            return matching("providers", kind, caller)

        def providers_of_type_joined(kind, joiner, caller=None):
            return matching("providers", kind, caller, _text(joiner))

        def uses_any_of(requested_kinds, caller=None):
            if isinstance(requested_kinds, str):
                requested_kinds = [requested_kinds]
            resources = list(self._spec_list("consumers") or []) + list(
                self._spec_list("providers") or []
            )
            # Only namespace/name is compared, versions are ignored
            full_names = [kinds.KindUri.parse(_text(kind)).full_name for kind in requested_kinds or []]
            uses_any = any(
                kinds.has_kind(resources, full_name) for full_name in full_names if full_name
            )
            return _block_or_flag(uses_any, caller)

        return {
            "consumes": consumes,
            "provides": provides,
            "consumers_of_type": consumers_of_type,
            "consumers_of_type_joined": consumers_of_type_joined,
            "providers_of_type": providers_of_type,
            "providers_of_type_joined": providers_of_type_joined,
            "usesAnyOf": uses_any_of,
        }

    def _formatting_helpers(self) -> Dict[str, Helper]:
        formatter = self.formatter

        def plain(value):
            return None if _is_missing(value) else value

        return {
            "type": lambda value: Markup(formatter.type(plain(value))),
            "constant": lambda value: Markup(formatter.constant(_text(value))),
            "comment": lambda value: Markup(formatter.comment(_text(value))),
            "namespace": lambda value: Markup(formatter.namespace(_text(value))),
            "variable": lambda value: Markup(formatter.variable(plain(value))),
            "string": lambda value: Markup(formatter.string(_text(value))),
            "method": lambda value: Markup(formatter.method(_text(value))),
            "returnType": lambda value: Markup(formatter.return_type(plain(value))),
            "getter": lambda type_like, property_id: Markup(
                formatter.getter(plain(type_like), _text(property_id))
            ),
            "setter": lambda type_like, property_id: Markup(
                formatter.setter(plain(type_like), _text(property_id))
            ),
        }

    def _structural_helpers(self) -> Dict[str, Helper]:
        formatter = self.formatter

        def each_property(items, caller=None):
            out = []
            for key, item in _entries(items):
                if isinstance(item, Mapping):
                    scope = {**item, "propertyId": key}
                else:
                    scope = {"propertyId": key, "value": item}
                out.append(str(caller(scope)) if caller is not None else "")
            return Markup("".join(out))

        def arguments(items, caller=None):
            entries = []
            for index, (key, value) in enumerate(_entries(items)):
                scope = {"argumentName": key, "index": index}
                if isinstance(value, Mapping):
                    scope.update(value)
                entries.append(scope)

            # sorted() is stable, so required and optional keep their own order
            entries = sorted(entries, key=lambda entry: bool(entry.get("optional")))

            out = []
            for entry in entries:
                rendered = str(caller(entry)) if caller is not None else ""
                out.append(re.sub(r"\s+", " ", rendered.strip()))

            return Markup(formatter.arguments(out))

        def methods(items, caller=None):
            out = []
            for key, item in _entries(items):
                if isinstance(item, Mapping):
                    item = {**item, "methodName": key}
                else:
                    item = {"methodName": key, "value": item}
                out.append(str(caller(item)) if caller is not None else "")
            return Markup(formatter.methods(out))

        return {
            "eachProperty": each_property,
            "arguments": arguments,
            "methods": methods,
        }

    def _switch_helpers(self) -> Dict[str, Helper]:
        switch_values = self._switch_values

        def switch(value, caller=None):
            switch_values.append(_compare_text(value))
            try:
                return Markup(caller()) if caller is not None else Markup("")
            finally:
                switch_values.pop()

        def case(value, caller=None):
            if switch_values and _compare_text(value) == switch_values[-1]:
                return Markup(caller()) if caller is not None else Markup("")
            return Markup("")

        return {"switch": switch, "case": case}

    def _type_reference_helpers(self) -> Dict[str, Helper]:
        context = self.context

        def each_type_reference(value, caller=None, all=False, allow=None):
            resolver = TypeReferenceResolver(
                context, include_all=bool(all), allowed=_as_list(allow)
            )
            out: List[str] = []

            def render(name: str):
                if caller is not None:
                    out.append(str(caller({"name": name})))

            names = resolver.resolve(_to_plain(value), render)
            if caller is None:
                return names
            return Markup("".join(out))

        def has_reference(value, type_ref, caller=None):
            return _block_or_flag(
                has_type_reference(_to_plain(value), _text(type_ref)), caller
            )

        def if_value_type(type_like, caller=None):
            name = type_like
            if isinstance(type_like, Mapping):
                name = type_like.get("name") or type_like.get("ref") or type_like.get("type")
            is_void = _is_missing(name) or not name or str(name).lower() == "void"
            return _block_or_flag(not is_void, caller)

        return {
            "eachTypeReference": each_type_reference,
            "hasTypeReference": has_reference,
            "ifValueType": if_value_type,
        }

    def _dsl_helpers(self) -> Dict[str, Helper]:
        engine = self

        def kaplang(configuration: Dict[str, Any]):
            @pass_context
            def helper(ctx, source, caller=None, namespace=None, valid_types=None):
                return engine._render_dsl(ctx, source, configuration, namespace, valid_types, caller)

            return helper

        def kaplang_has_reference(entity, type_ref, caller=None):
            return _block_or_flag(dsl.type_has_reference(entity, _text(type_ref)), caller)

        def kaplang_render(entity, caller=None):
            if dsl.is_data_entity(entity) and dsl.is_native(entity):
                logger.info("Skipping native type: %s", entity.get("name"))
                return _block_or_flag(False, caller)
            return _block_or_flag(True, caller)

        return {
            "kaplang_config": kaplang(dsl.CONFIG_CONFIGURATION),
            "kaplang_types": kaplang(dsl.DATATYPE_CONFIGURATION),
            "kaplang_methods": kaplang({**dsl.METHOD_CONFIGURATION, "rest": False}),
            "kaplang_rest_methods": kaplang({**dsl.METHOD_CONFIGURATION, "rest": True}),
            "kaplang_has_reference": kaplang_has_reference,
            "kaplang_render": kaplang_render,
            "controller_name": lambda entity: Markup(dsl.controller_name(entity)),
        }

    def _render_dsl(self, ctx, source, configuration, namespace, valid_types, caller):
        code = source.get("value") if isinstance(source, Mapping) else None
        if not code:
            return Markup("") if caller is not None else []

        base_name = namespace or _metadata_name(ctx.get("data")) or "main"
        entities = dsl.parse_source(
            self.dsl_parser, code, configuration, _as_list(valid_types)
        )
        entities = dsl.reshape_entities(entities, base_name)

        if caller is None:
            return entities
        return Markup("\n".join(str(caller(entity)) for entity in entities))


def _entries(items: Any) -> Iterable:
    """Key/value pairs of a mapping, or index/value pairs of a sequence."""
    if _is_missing(items) or not items:
        return []
    if isinstance(items, Mapping):
        return list(items.items())
    if isinstance(items, (list, tuple)):
        return list(enumerate(items))
    return []


def _as_list(value: Any) -> List[Any]:
    if _is_missing(value) or not value:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def _metadata_name(data: Any) -> Optional[str]:
    if not isinstance(data, Mapping):
        return None
    metadata = data.get("metadata")
    if not isinstance(metadata, Mapping):
        return None
    return metadata.get("name")


def create_template_engine(
    data: Any,
    context: Any,
    formatter: Optional[CodeFormatter] = None,
    dsl_parser: Optional[dsl.DSLParser] = None,
    autoescape: bool = False,
) -> TemplateEngine:
    """Create a template engine for one generation call."""
    return TemplateEngine(data, context, formatter, dsl_parser, autoescape=autoescape)


def clone_data(data: Any) -> Any:
    """Deep copy render data so templates cannot leak changes between files."""
    return copy.deepcopy(data)
