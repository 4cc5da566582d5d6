"""
Shared fixtures: the test_records table as static descriptors and as a
DuckDB in-memory database.

DuckDB caps DECIMAL at 38 digits, so the DuckDB copy uses NUMERIC(38, 0)
where the static copy uses NUMERIC(128, 0).
"""

import duckdb
import pytest

from db2avro import AvroConfig, DbSchemaExtractor, StaticMetadataSource


TEST_RECORDS_YAML = """
schemas:
  public:
    test_records:
      comment: Records used by the generation tests
      columns:
        - {name: id, type: INT, nullable: false}
        - {name: name, type: VARCHAR(15), size: 15, comment: Display name}
        - {name: created, type: TIMESTAMP, nullable: false}
        - {name: updated, type: TIMESTAMP}
        - {name: decimal_field, type: NUMERIC, precision: 20, scale: 3}
        - {name: other_decimal_field, type: NUMERIC, precision: 128, scale: 0}
"""


@pytest.fixture
def static_source():
    return StaticMetadataSource.from_yaml(TEST_RECORDS_YAML)


@pytest.fixture
def extractor(static_source):
    return DbSchemaExtractor(static_source)


@pytest.fixture
def avro_config():
    return AvroConfig("test.namespace")


@pytest.fixture
def duckdb_conn():
    conn = duckdb.connect(":memory:")
    conn.execute("CREATE SCHEMA public")
    conn.execute("""
        CREATE TABLE public.test_records (
            id INTEGER NOT NULL,
            name VARCHAR(15),
            created TIMESTAMP NOT NULL,
            updated TIMESTAMP,
            decimal_field NUMERIC(20, 3),
            other_decimal_field NUMERIC(38, 0)
        )
    """)
    yield conn
    conn.close()


@pytest.fixture
def duckdb_extractor(duckdb_conn):
    return DbSchemaExtractor.for_duckdb(duckdb_conn)
