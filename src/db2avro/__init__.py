"""
db2avro - Avro Schemas from Database Metadata

Derives Avro record schemas from relational table metadata and renders
them as deterministic JSON text.

Modules:
- sources: metadata sources (DuckDB catalog, static YAML/dict descriptors)
- type_mapper: SQL type -> Avro type (logical types for dates and decimals)
- naming: composable name mappers (camel case, plural removal, ...)
- model: AvroSchema / AvroField / AvroType
- extractor: builds schemas per table, per schema, or for the whole database
- formatters: formatter chain with per-kind overrides
- generator: top-level generate() entry point
- config: AvroConfig, FormatterConfig, YAML loading
"""

__version__ = "0.1.0"

from .config import (
    AvroConfig,
    EntityKind,
    FormatterConfig,
    FormatterConfigBuilder,
    load_avro_config,
    load_formatter_config,
)
from .errors import (
    ConfigError,
    Db2AvroError,
    InvalidNameError,
    SchemaNotFoundError,
    TableNotFoundError,
    UnsupportedTypeError,
)
from .extractor import DbSchemaExtractor
from .formatters import render
from .generator import generate, generate_all
from .model import AvroField, AvroSchema, AvroType, LogicalDate, LogicalDecimal, Primitive
from .naming import NameMapper, identity, remove_plural, strip_prefix, to_camel_case, to_pascal_case, to_snake_case
from .sources import ColumnInfo, DuckDBMetadataSource, MetadataSource, StaticMetadataSource, TableRef
from .type_mapper import map_column
