"""
db2avro - Formatter Chain

Renders model entities (AvroSchema, AvroField, AvroType) into Avro JSON text.

Each entity kind has a default formatter. A FormatterConfig may override
any kind; the override is called with the entity, the config and the
default rendering, so it can wrap or post-process the default text:

    strip = lambda schema, config, text: text.replace(" ", "").replace("\\n", "")
    config = FormatterConfig.builder().set_formatter(AvroSchema, strip).build()

Nested entities are rendered through render(), so a field or type override
also applies inside a schema.

Layout with pretty_print_schema (indent "  "):

    {
      "type": "record",
      "name": "test_records",
      "namespace": "test.namespace",
      "fields": [
        {"name": "id", "type": "int"},
        {"name": "name", "type": ["null", "string"]}
      ]
    }

Without pretty_print_schema the schema is one line with no whitespace.
pretty_print_fields expands every field object onto several lines.
"""

import json
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import DEFAULT_FORMATTER_CONFIG, EntityKind, FormatterConfig
from .errors import InvalidNameError
from .model import AvroField, AvroSchema, AvroType

AVRO_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

RESERVED_SCHEMA_KEYS = {"type", "name", "namespace", "doc", "fields", "aliases"}


# ------------------------------------------------------------------
# Name validation
# ------------------------------------------------------------------

def validate_name(name: Any, what: str = "name") -> None:
    """Raise InvalidNameError unless name matches [A-Za-z_][A-Za-z0-9_]*."""
    if not isinstance(name, str) or not AVRO_NAME.match(name):
        raise InvalidNameError(str(name), f"not a valid Avro {what}")


def validate_namespace(namespace: Optional[str]) -> None:
    """A namespace is empty or a dot-separated sequence of Avro names."""
    if not namespace:
        return
    for part in namespace.split("."):
        if not isinstance(part, str) or not AVRO_NAME.match(part):
            raise InvalidNameError(namespace, "not a valid Avro namespace")


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _dumps(value: Any, config: FormatterConfig) -> str:
    separators = (", ", ": ") if config.pretty_print_schema else (",", ":")
    return json.dumps(value, separators=separators, ensure_ascii=False)


def _key_sep(config: FormatterConfig) -> str:
    return ": " if config.pretty_print_schema else ":"


def _indent_lines(text: str, prefix: str) -> str:
    return "\n".join(prefix + line for line in text.split("\n"))


def _members(entries: List[Tuple[str, str]], config: FormatterConfig) -> List[str]:
    return [f"{json.dumps(key, ensure_ascii=False)}{_key_sep(config)}{value}" for key, value in entries]


# ------------------------------------------------------------------
# Default formatters
# ------------------------------------------------------------------

def format_type(avro_type: AvroType, config: FormatterConfig) -> str:
    """Bare type, ["null", type] union, or logical type object. Always inline."""
    return _dumps(avro_type.to_json(), config)


def format_field(avro_field: AvroField, config: FormatterConfig) -> str:
    validate_name(avro_field.name, "field name")

    entries = [
        ("name", _dumps(avro_field.name, config)),
        ("type", render(avro_field.type, config)),
    ]
    if avro_field.doc:
        entries.append(("doc", _dumps(avro_field.doc, config)))
    if avro_field.has_default:
        entries.append(("default", _dumps(avro_field.default, config)))

    members = _members(entries, config)
    if config.pretty_print_fields:
        body = ",\n".join(config.indent + member for member in members)
        return "{\n" + body + "\n}"

    separator = ", " if config.pretty_print_schema else ","
    return "{" + separator.join(members) + "}"


def format_schema(schema: AvroSchema, config: FormatterConfig) -> str:
    validate_name(schema.name, "schema name")
    validate_namespace(schema.namespace)

    seen = set()
    for avro_field in schema.fields:
        if avro_field.name in seen:
            raise InvalidNameError(avro_field.name, f"duplicate field in schema '{schema.name}'")
        seen.add(avro_field.name)

    for key in schema.custom_properties:
        if key in RESERVED_SCHEMA_KEYS:
            raise InvalidNameError(key, "custom property collides with a reserved schema key")

    head = [
        ("type", _dumps("record", config)),
        ("name", _dumps(schema.name, config)),
    ]
    if schema.namespace:
        head.append(("namespace", _dumps(schema.namespace, config)))
    if schema.doc:
        head.append(("doc", _dumps(schema.doc, config)))

    tail = [(key, _dumps(value, config)) for key, value in schema.custom_properties.items()]
    field_texts = [render(f, config) for f in schema.fields]

    if not config.pretty_print_schema:
        fields_json = "[" + ",".join(field_texts) + "]"
        members = _members(head + [("fields", fields_json)] + tail, config)
        return "{" + ",".join(members) + "}"

    indent = config.indent
    if field_texts:
        body = ",\n".join(_indent_lines(text, indent * 2) for text in field_texts)
        fields_json = "[\n" + body + "\n" + indent + "]"
    else:
        fields_json = "[]"

    members = _members(head + [("fields", fields_json)] + tail, config)
    return "{\n" + ",\n".join(indent + member for member in members) + "\n}"


DEFAULT_FORMATTERS: Dict[EntityKind, Callable[[Any, FormatterConfig], str]] = {
    EntityKind.SCHEMA: format_schema,
    EntityKind.FIELD: format_field,
    EntityKind.TYPE: format_type,
}


def render(entity: Any, config: Optional[FormatterConfig] = None) -> str:
    """
    Render a schema, field or type to JSON text.

    Args:
        entity: AvroSchema, AvroField or AvroType
        config: Formatting settings; defaults to FormatterConfig()

    Returns:
        JSON text, without a trailing newline

    Raises:
        InvalidNameError: if a name is not a valid Avro name
    """
    config = config or DEFAULT_FORMATTER_CONFIG
    kind = EntityKind.of(entity)

    text = DEFAULT_FORMATTERS[kind](entity, config)

    override = config.get_override(kind)
    if override is not None:
        text = override(entity, config, text)
    return text
