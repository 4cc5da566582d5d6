"""
db2avro - Schema Generator

Top-level entry point: renders extracted schemas to Avro JSON text.

    extractor = DbSchemaExtractor.for_duckdb("warehouse.duckdb")
    schema = extractor.get_for_table(AvroConfig("com.acme"), "main", "orders")
    print(generate(schema))
"""

from typing import Dict, Iterable, Optional

from .config import AvroConfig, FormatterConfig
from .formatters import render
from .model import AvroSchema


def generate(schema: AvroSchema, formatter_config: Optional[FormatterConfig] = None) -> str:
    """
    Render one schema.

    Args:
        schema: Schema produced by the extractor
        formatter_config: Formatting settings; defaults to FormatterConfig()

    Returns:
        Avro schema JSON text
    """
    return render(schema, formatter_config)


def generate_all(
    schemas: Iterable[AvroSchema],
    formatter_config: Optional[FormatterConfig] = None,
) -> Dict[str, str]:
    """Render several schemas, keyed by full name (namespace.name)."""
    return {schema.full_name: generate(schema, formatter_config) for schema in schemas}


if __name__ == "__main__":
    from .extractor import DbSchemaExtractor
    from .naming import remove_plural, to_camel_case

    print("db2avro - Schema Generator Demo")
    print("=" * 50)

    extractor = DbSchemaExtractor.for_duckdb(":memory:")
    extractor.source.conn.execute("""
        CREATE TABLE test_records (
            id INTEGER NOT NULL,
            name VARCHAR(15),
            created TIMESTAMP NOT NULL,
            updated TIMESTAMP,
            decimal_field NUMERIC(20, 3)
        )
    """)

    config = AvroConfig(namespace="demo.namespace")
    schema = extractor.get_for_table(config, "main", "test_records")

    print("\nDefault formatting:")
    print(generate(schema))

    print("\nCompact:")
    print(generate(schema, FormatterConfig.builder().set_pretty_print_schema(False).build()))

    mapper = to_camel_case.and_then(remove_plural)
    config = AvroConfig(namespace="demo.namespace", schema_name_mapper=mapper, field_name_mapper=mapper)
    print("\nCamel case names, expanded fields:")
    print(generate(
        extractor.get_for_table(config, "main", "test_records"),
        FormatterConfig.builder().set_indent("    ").set_pretty_print_fields(True).build(),
    ))
