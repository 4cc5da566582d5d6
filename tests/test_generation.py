"""
End-to-end generation tests: table metadata in, Avro JSON text out.

Run with:
    pytest tests/test_generation.py -v
"""

import json

import pytest

from db2avro import (
    AvroConfig,
    DbSchemaExtractor,
    FormatterConfig,
    InvalidNameError,
    StaticMetadataSource,
    generate,
    generate_all,
    remove_plural,
    to_camel_case,
)


TIMESTAMP = '{"type": "long", "logicalType": "timestamp-millis"}'
DECIMAL_20_3 = '{"type": "string", "logicalType": "decimal", "precision": 20, "scale": 3}'
DECIMAL_128_0 = '{"type": "string", "logicalType": "decimal", "precision": 128, "scale": 0}'

DEFAULT_SCHEMA = """\
{
  "type": "record",
  "name": "test_records",
  "namespace": "test.namespace",
  "fields": [
    {"name": "id", "type": "int"},
    {"name": "name", "type": ["null", "string"]},
    {"name": "created", "type": %(ts)s},
    {"name": "updated", "type": ["null", %(ts)s]},
    {"name": "decimal_field", "type": ["null", %(d1)s]},
    {"name": "other_decimal_field", "type": ["null", %(d2)s]}
  ]
}""" % {"ts": TIMESTAMP, "d1": DECIMAL_20_3, "d2": DECIMAL_128_0}

ALL_NULL_SCHEMA = """\
{
  "type": "record",
  "name": "test_records",
  "namespace": "test.namespace",
  "fields": [
    {"name": "id", "type": ["null", "int"], "default": null},
    {"name": "name", "type": ["null", "string"], "default": null},
    {"name": "created", "type": ["null", %(ts)s], "default": null},
    {"name": "updated", "type": ["null", %(ts)s], "default": null},
    {"name": "decimal_field", "type": ["null", %(d1)s], "default": null},
    {"name": "other_decimal_field", "type": ["null", %(d2)s], "default": null}
  ]
}""" % {"ts": TIMESTAMP, "d1": DECIMAL_20_3, "d2": DECIMAL_128_0}


def extract(extractor, config):
    return extractor.get_for_table(config, "public", "test_records")


class TestDefaultGeneration:
    def test_default_layout(self, extractor, avro_config):
        assert generate(extract(extractor, avro_config)) == DEFAULT_SCHEMA

    def test_explicit_default_config_matches(self, extractor, avro_config):
        schema = extract(extractor, avro_config)
        assert generate(schema, FormatterConfig()) == generate(schema)
        assert generate(schema, FormatterConfig.builder().build()) == generate(schema)

    def test_nullable_true_by_default(self, extractor, avro_config):
        avro_config.nullable_true_by_default = True
        assert generate(extract(extractor, avro_config)) == ALL_NULL_SCHEMA

    def test_all_fields_default_null(self, extractor, avro_config):
        avro_config.all_fields_default_null = True
        assert generate(extract(extractor, avro_config)) == ALL_NULL_SCHEMA

    def test_output_is_deterministic(self, extractor, avro_config):
        first = generate(extract(extractor, avro_config))
        second = generate(extract(extractor, avro_config))
        assert first == second


class TestFormatting:
    def test_wide_indent_with_expanded_fields(self, extractor, avro_config):
        config = FormatterConfig.builder().set_indent("    ").set_pretty_print_fields(True).build()
        text = generate(extract(extractor, avro_config), config)
        lines = text.split("\n")

        assert lines[:6] == [
            "{",
            '    "type": "record",',
            '    "name": "test_records",',
            '    "namespace": "test.namespace",',
            '    "fields": [',
            "        {",
        ]
        assert lines[6:9] == [
            '            "name": "id",',
            '            "type": "int"',
            "        },",
        ]
        assert lines[-2:] == ["    ]", "}"]
        assert json.loads(text) == json.loads(DEFAULT_SCHEMA)

    def test_compact(self, extractor, avro_config):
        config = FormatterConfig.builder().set_pretty_print_schema(False).build()
        text = generate(extract(extractor, avro_config), config)
        assert text == DEFAULT_SCHEMA.replace(" ", "").replace("\n", "")

    def test_override_matches_compact(self, extractor, avro_config):
        def strip(schema, config, text):
            return text.replace(" ", "").replace("\n", "")

        schema = extract(extractor, avro_config)
        stripped = FormatterConfig.builder().set_formatter(type(schema), strip).build()
        compact = FormatterConfig.builder().set_pretty_print_schema(False).build()
        assert generate(schema, stripped) == generate(schema, compact)


class TestNamingAndProperties:
    def test_camel_case_singular_names(self, extractor, avro_config):
        mapper = to_camel_case.and_then(remove_plural)
        avro_config.schema_name_mapper = mapper
        avro_config.field_name_mapper = mapper

        expected = (
            DEFAULT_SCHEMA
            .replace('"test_records"', '"testRecord"')
            .replace('"other_decimal_field"', '"otherDecimalField"')
            .replace('"decimal_field"', '"decimalField"')
        )
        assert generate(extract(extractor, avro_config)) == expected

    def test_custom_property_from_post_processor(self, extractor, avro_config):
        avro_config.post_processor = (
            lambda schema, table: schema.add_custom_property("test-propertyy", "test-value")
        )
        text = generate(extract(extractor, avro_config))
        assert text == DEFAULT_SCHEMA[:-2] + ',\n  "test-propertyy": "test-value"\n}'

    def test_sql_comments_as_doc(self, extractor, avro_config):
        avro_config.use_sql_comments_as_doc = True
        parsed = json.loads(generate(extract(extractor, avro_config)))
        assert list(parsed) == ["type", "name", "namespace", "doc", "fields"]
        assert parsed["doc"] == "Records used by the generation tests"
        assert parsed["fields"][1] == {"name": "name", "type": ["null", "string"], "doc": "Display name"}


class TestGenerateAll:
    @pytest.fixture
    def shop(self):
        return DbSchemaExtractor(StaticMetadataSource({
            "sales": {
                "orders": [
                    {"name": "id", "type": "BIGINT", "nullable": False},
                    {"name": "total", "type": "DECIMAL(12, 2)"},
                ],
                "customers": [
                    {"name": "id", "type": "INT", "nullable": False},
                    {"name": "email", "type": "VARCHAR"},
                ],
            },
        }))

    def test_keyed_by_full_name(self, shop):
        schemas = shop.get_for_schema(AvroConfig("com.shop"), "sales")
        rendered = generate_all(schemas)
        assert list(rendered) == ["com.shop.orders", "com.shop.customers"]
        assert json.loads(rendered["com.shop.orders"])["fields"][1]["type"] == [
            "null",
            {"type": "string", "logicalType": "decimal", "precision": 12, "scale": 2},
        ]

    def test_uses_formatter_config(self, shop):
        schemas = shop.get_all(AvroConfig())
        compact = FormatterConfig.builder().set_pretty_print_schema(False).build()
        rendered = generate_all(schemas, compact)
        assert rendered["customers"] == (
            '{"type":"record","name":"customers","fields":['
            '{"name":"id","type":"int"},'
            '{"name":"email","type":["null","string"]}'
            ']}'
        )


class TestDuckDBGeneration:
    def test_default_layout(self, duckdb_extractor, avro_config):
        expected = DEFAULT_SCHEMA.replace('"precision": 128', '"precision": 38')
        assert generate(extract(duckdb_extractor, avro_config)) == expected


class TestInvalidNames:
    @pytest.mark.parametrize("column_name", ["my col", "1st_value", "price-eur"])
    def test_unmapped_column_name_fails_at_generation(self, avro_config, column_name):
        source = StaticMetadataSource({"public": {"prices": [
            {"name": "id", "type": "INT", "nullable": False},
            {"name": column_name, "type": "DOUBLE"},
        ]}})
        schema = DbSchemaExtractor(source).get_for_table(avro_config, "public", "prices")
        assert schema.field_names == ["id", column_name]
        with pytest.raises(InvalidNameError) as exc_info:
            generate(schema)
        assert exc_info.value.name == column_name

    def test_name_mapper_repairs_column_name(self, avro_config):
        source = StaticMetadataSource({"public": {"prices": [{"name": "my col", "type": "DOUBLE"}]}})
        avro_config.field_name_mapper = to_camel_case
        schema = DbSchemaExtractor(source).get_for_table(avro_config, "public", "prices")
        assert json.loads(generate(schema))["fields"][0]["name"] == "myCol"

    def test_invalid_table_name_fails_at_generation(self, avro_config):
        source = StaticMetadataSource({"public": {"order lines": [{"name": "id", "type": "INT"}]}})
        schema = DbSchemaExtractor(source).get_for_table(avro_config, "public", "order lines")
        with pytest.raises(InvalidNameError, match="order lines"):
            generate(schema)
