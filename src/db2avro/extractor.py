"""
db2avro - Schema Extractor

Builds AvroSchema instances from a metadata source:
- get_for_table: one table, fails if it does not exist
- get_for_schema: every table of a database schema
- get_for_tables: selected tables, silently skipping unknown names
- get_all: every table of every database schema

Per table: map the table name, map and type every column in order,
apply the default-value policy, then call the configured post-processor.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import duckdb

from .config import AvroConfig
from .errors import InvalidNameError
from .model import NO_DEFAULT, AvroField, AvroSchema
from .sources import ColumnInfo, DuckDBMetadataSource, MetadataSource, TableRef
from .type_mapper import map_column

logger = logging.getLogger(__name__)


class DbSchemaExtractor:
    """
    Derives Avro schemas from database table metadata.

    The extractor holds no state between calls besides its source.
    """

    def __init__(self, source: MetadataSource, dialect: Optional[str] = None):
        """
        Args:
            source: Metadata source to read tables from
            dialect: sqlglot dialect for SQL type names; defaults to the
                source's `dialect` attribute when it has one
        """
        self.source = source
        self.dialect = dialect if dialect is not None else getattr(source, "dialect", None)

    @classmethod
    def for_duckdb(
        cls, database: Union[str, Path, duckdb.DuckDBPyConnection] = ":memory:"
    ) -> "DbSchemaExtractor":
        """Extractor over a DuckDB database path or open connection."""
        return cls(DuckDBMetadataSource(database))

    def close(self) -> None:
        """Close the source when it holds a connection of its own."""
        close = getattr(self.source, "close", None)
        if close is not None:
            close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def get_for_table(self, config: AvroConfig, db_schema: str, table_name: str) -> AvroSchema:
        """
        Build the Avro schema of one table.

        Raises:
            SchemaNotFoundError: if db_schema does not exist
            TableNotFoundError: if the table is not in db_schema
            UnsupportedTypeError: if a column type has no mapping
        """
        table = self.source.get_table(db_schema, table_name)
        return self._build_schema(config, table)

    def get_for_schema(self, config: AvroConfig, db_schema: str) -> List[AvroSchema]:
        """
        Build one Avro schema per table of db_schema, in the source's order.

        An existing but empty schema yields an empty list.

        Raises:
            SchemaNotFoundError: if db_schema does not exist
        """
        return [
            self._build_schema(config, self.source.get_table(db_schema, table_name))
            for table_name in self.source.list_tables(db_schema)
        ]

    def get_for_tables(self, config: AvroConfig, db_schema: str, *table_names: str) -> List[AvroSchema]:
        """
        Build Avro schemas for the named tables, in the order given.

        Names not present in db_schema are skipped.
        """
        existing = set(self.source.list_tables(db_schema))

        result = []
        for table_name in table_names:
            if table_name not in existing:
                logger.debug("Skipping unknown table %s.%s", db_schema, table_name)
                continue
            result.append(self.get_for_table(config, db_schema, table_name))
        return result

    def get_all(self, config: AvroConfig) -> List[AvroSchema]:
        """Build Avro schemas for every table of every database schema."""
        result = []
        for db_schema in self.source.list_schemas():
            result.extend(self.get_for_schema(config, db_schema))
        return result

    def _build_schema(self, config: AvroConfig, table: TableRef) -> AvroSchema:
        schema = AvroSchema(
            name=config.schema_name_mapper(table.name),
            namespace=config.namespace,
            doc=table.comment if config.use_sql_comments_as_doc else None,
        )

        for column in table.columns:
            avro_field = self._build_field(config, column)
            if schema.get_field(avro_field.name) is not None:
                raise InvalidNameError(
                    avro_field.name,
                    f"column '{column.name}' maps to a duplicate field in '{schema.name}'",
                )
            schema.add_field(avro_field)

        if config.post_processor is not None:
            config.post_processor(schema, table)

        logger.debug(
            "Extracted %s.%s -> %s (%d fields)",
            table.db_schema, table.name, schema.full_name, len(schema.fields),
        )
        return schema

    def _build_field(self, config: AvroConfig, column: ColumnInfo) -> AvroField:
        avro_type = map_column(column, config, dialect=self.dialect)
        default = NO_DEFAULT

        # A null default is only valid on a union starting with null
        if config.all_fields_default_null:
            avro_type = avro_type.as_nullable()
            default = None
        elif config.nullable_true_by_default:
            default = None

        return AvroField(
            name=config.field_name_mapper(column.name),
            type=avro_type,
            default=default,
            doc=column.comment if config.use_sql_comments_as_doc else None,
        )
