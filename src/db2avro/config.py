"""
db2avro - Configuration

Two configuration objects, both owned by the caller:
- AvroConfig: namespace, nullability/default policy, name mappers,
  post-processor hook
- FormatterConfig: indentation, pretty-print flags, per-kind formatter
  overrides (immutable, built with FormatterConfig.builder())

Both can be loaded from a YAML file:

    avro:
      namespace: test.namespace
      nullable_true_by_default: false
      schema_name_mapper: [camel_case, remove_plural]
    formatter:
      indent: "    "
      pretty_print_fields: true
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Union

import yaml

from .errors import ConfigError
from .model import AvroField, AvroSchema, AvroType
from .naming import identity, mapper_from_names


class EntityKind(Enum):
    """Kinds of model entities the formatter chain can render."""
    SCHEMA = "schema"
    FIELD = "field"
    TYPE = "type"

    @classmethod
    def of(cls, entity: Any) -> "EntityKind":
        """Resolve the kind of a model instance or model class."""
        target = entity if isinstance(entity, type) else type(entity)
        for model_class, kind in _KIND_BY_CLASS.items():
            if issubclass(target, model_class):
                return kind
        raise TypeError(f"No formatter kind for {target.__name__}")


_KIND_BY_CLASS = {
    AvroSchema: EntityKind.SCHEMA,
    AvroField: EntityKind.FIELD,
    AvroType: EntityKind.TYPE,
}

# (schema, table_ref) -> None
PostProcessor = Callable[[AvroSchema, Any], None]

# (entity, formatter_config, default_rendering) -> rendering
Formatter = Callable[[Any, "FormatterConfig", str], str]


@dataclass
class AvroConfig:
    """Settings for one or more extraction calls."""
    namespace: Optional[str] = None
    nullable_true_by_default: bool = False
    all_fields_default_null: bool = False
    schema_name_mapper: Callable[[str], str] = identity
    field_name_mapper: Callable[[str], str] = identity
    post_processor: Optional[PostProcessor] = None
    use_sql_comments_as_doc: bool = False


@dataclass(frozen=True)
class FormatterConfig:
    """Rendering settings. Use FormatterConfig.builder() to customize."""
    indent: str = "  "
    pretty_print_schema: bool = True
    pretty_print_fields: bool = False
    formatter_overrides: Mapping[EntityKind, Formatter] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @staticmethod
    def builder() -> "FormatterConfigBuilder":
        return FormatterConfigBuilder()

    def get_override(self, kind: EntityKind) -> Optional[Formatter]:
        return self.formatter_overrides.get(kind)


def _require_bool(key: str, value: Any) -> bool:
    # Quoted YAML booleans ("false") arrive as str
    if not isinstance(value, bool):
        raise ConfigError(f"'{key}' must be true or false, got {value!r}")
    return value


class FormatterConfigBuilder:
    """Chained builder producing an immutable FormatterConfig."""

    def __init__(self):
        self._indent = "  "
        self._pretty_print_schema = True
        self._pretty_print_fields = False
        self._overrides: Dict[EntityKind, Formatter] = {}

    def set_indent(self, indent: str) -> "FormatterConfigBuilder":
        if not isinstance(indent, str) or indent.strip():
            raise ConfigError(f"Indent must be whitespace only, got {indent!r}")
        self._indent = indent
        return self

    def set_pretty_print_schema(self, enabled: bool) -> "FormatterConfigBuilder":
        self._pretty_print_schema = _require_bool("pretty_print_schema", enabled)
        return self

    def set_pretty_print_fields(self, enabled: bool) -> "FormatterConfigBuilder":
        self._pretty_print_fields = _require_bool("pretty_print_fields", enabled)
        return self

    def set_formatter(self, kind: Union[EntityKind, type], formatter: Formatter) -> "FormatterConfigBuilder":
        """
        Override the formatter for one entity kind.

        Args:
            kind: EntityKind or a model class (AvroSchema, AvroField, AvroType)
            formatter: callable (entity, config, default_rendering) -> str
        """
        if not isinstance(kind, EntityKind):
            kind = EntityKind.of(kind)
        self._overrides[kind] = formatter
        return self

    def build(self) -> FormatterConfig:
        return FormatterConfig(
            indent=self._indent,
            pretty_print_schema=self._pretty_print_schema,
            pretty_print_fields=self._pretty_print_fields,
            formatter_overrides=MappingProxyType(dict(self._overrides)),
        )


DEFAULT_FORMATTER_CONFIG = FormatterConfig()


# ------------------------------------------------------------------
# YAML loading
# ------------------------------------------------------------------

def _read_source(source: Union[str, Path, Mapping[str, Any]]) -> Dict[str, Any]:
    """Read a YAML file path or pass a mapping through."""
    if isinstance(source, Mapping):
        return dict(source)

    path = Path(source)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {path}")
    return data


SECTIONS = ("avro", "formatter")


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    if name in data:
        section = data[name] or {}
    elif any(s in data for s in SECTIONS):
        section = {}
    else:
        section = data
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' section must be a mapping")
    return section


AVRO_BOOL_KEYS = {"nullable_true_by_default", "all_fields_default_null", "use_sql_comments_as_doc"}


def load_avro_config(source: Union[str, Path, Mapping[str, Any]]) -> AvroConfig:
    """
    Build an AvroConfig from a YAML file or mapping.

    Reads the `avro` section when present, otherwise the top level.
    Name mappers are given as lists of names (see naming.MAPPERS).
    """
    data = _section(_read_source(source), "avro")
    known = {f.name for f in fields(AvroConfig)} - {"post_processor"}

    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown avro config keys: {sorted(unknown)}")

    for key in sorted(AVRO_BOOL_KEYS & set(data)):
        _require_bool(key, data[key])
    if data.get("namespace") is not None and not isinstance(data["namespace"], str):
        raise ConfigError(f"'namespace' must be a string, got {data['namespace']!r}")

    values = dict(data)
    for key in ("schema_name_mapper", "field_name_mapper"):
        if key in values:
            values[key] = mapper_from_names(values[key] or [])
    return AvroConfig(**values)


def load_formatter_config(source: Union[str, Path, Mapping[str, Any]]) -> FormatterConfig:
    """Build a FormatterConfig from the `formatter` section of a YAML file or mapping."""
    data = _section(_read_source(source), "formatter")
    builder = FormatterConfig.builder()
    setters = {
        "indent": builder.set_indent,
        "pretty_print_schema": builder.set_pretty_print_schema,
        "pretty_print_fields": builder.set_pretty_print_fields,
    }

    for key, value in data.items():
        if key not in setters:
            raise ConfigError(f"Unknown formatter config key: {key}")
        setters[key](value)
    return builder.build()
