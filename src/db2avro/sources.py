"""
db2avro - Metadata Sources

A metadata source answers three questions:
- which database schemas exist
- which tables a schema holds
- which columns (in order) a table has

Two implementations:
- DuckDBMetadataSource: reads the DuckDB catalog functions
- StaticMetadataSource: table descriptors from a dict or a YAML document

The extractor only sees the MetadataSource protocol.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

import duckdb
import yaml

from .errors import ConfigError, SchemaNotFoundError, TableNotFoundError

logger = logging.getLogger(__name__)

# Schemas that belong to the engine, never to the user
SYSTEM_SCHEMAS = {"information_schema", "pg_catalog"}


@dataclass(frozen=True)
class ColumnInfo:
    """Raw column descriptor as reported by the database."""
    name: str
    sql_type: str
    nullable: bool = True
    size: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    comment: Optional[str] = None


@dataclass
class TableRef:
    """A table and its ordered columns. Passed to the post-processor."""
    db_schema: str
    name: str
    columns: List[ColumnInfo] = field(default_factory=list)
    comment: Optional[str] = None


class MetadataSource(Protocol):
    """Contract between the extractor and a database catalog."""

    def list_schemas(self) -> List[str]:
        """Return every user-visible database schema."""
        ...

    def list_tables(self, db_schema: str) -> List[str]:
        """
        Return table names of a schema in natural order.

        Raises:
            SchemaNotFoundError: if the schema does not exist
        """
        ...

    def get_table(self, db_schema: str, table_name: str) -> TableRef:
        """
        Return a table with its ordered column descriptors.

        Raises:
            SchemaNotFoundError: if the schema does not exist
            TableNotFoundError: if the table does not exist in the schema
        """
        ...


class DuckDBMetadataSource:
    """
    Metadata source backed by a DuckDB database.

    Queries duckdb_schemas(), duckdb_tables() and duckdb_columns() of the
    current catalog. Connection errors propagate as duckdb.Error.
    """

    dialect = "duckdb"

    def __init__(
        self,
        database: Union[str, Path, duckdb.DuckDBPyConnection] = ":memory:",
        catalog: Optional[str] = None,
    ):
        if isinstance(database, duckdb.DuckDBPyConnection):
            self.conn = database
            self._owns_connection = False
        else:
            self.conn = duckdb.connect(str(database))
            self._owns_connection = True

        if catalog is None:
            try:
                (catalog,) = self.conn.execute("SELECT current_database()").fetchone()
            except duckdb.Error:
                self.close()
                raise
        self.catalog = catalog

    def close(self) -> None:
        """Close the connection if this source opened it."""
        if self._owns_connection:
            self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def list_schemas(self) -> List[str]:
        rows = self.conn.execute("""
            SELECT schema_name
            FROM duckdb_schemas()
            WHERE database_name = ?
            ORDER BY schema_name
        """, [self.catalog]).fetchall()
        return [name for (name,) in rows if name not in SYSTEM_SCHEMAS]

    def has_schema(self, db_schema: str) -> bool:
        return db_schema in self.list_schemas()

    def list_tables(self, db_schema: str) -> List[str]:
        if not self.has_schema(db_schema):
            raise SchemaNotFoundError(db_schema)

        rows = self.conn.execute("""
            SELECT table_name
            FROM duckdb_tables()
            WHERE database_name = ? AND schema_name = ?
            ORDER BY table_name
        """, [self.catalog, db_schema]).fetchall()
        return [name for (name,) in rows]

    def get_table(self, db_schema: str, table_name: str) -> TableRef:
        if not self.has_schema(db_schema):
            raise SchemaNotFoundError(db_schema)

        table = self.conn.execute("""
            SELECT table_name, comment
            FROM duckdb_tables()
            WHERE database_name = ? AND schema_name = ? AND table_name = ?
        """, [self.catalog, db_schema, table_name]).fetchone()
        if table is None:
            raise TableNotFoundError(db_schema, table_name)

        rows = self.conn.execute("""
            SELECT column_name, data_type, is_nullable,
                   character_maximum_length, numeric_precision, numeric_scale,
                   comment
            FROM duckdb_columns()
            WHERE database_name = ? AND schema_name = ? AND table_name = ?
            ORDER BY column_index
        """, [self.catalog, db_schema, table_name]).fetchall()

        columns = [
            ColumnInfo(
                name=name,
                sql_type=data_type,
                nullable=bool(is_nullable),
                size=size,
                precision=precision,
                scale=scale,
                comment=comment or None,
            )
            for name, data_type, is_nullable, size, precision, scale, comment in rows
        ]
        logger.debug("Read %d columns of %s.%s", len(columns), db_schema, table_name)

        return TableRef(
            db_schema=db_schema,
            name=table[0],
            columns=columns,
            comment=table[1] or None,
        )


class StaticMetadataSource:
    """
    Metadata source over fixed table descriptors.

    Layout: {db_schema: {table_name: {"comment": ..., "columns": [...]}}}.
    A table may also be given directly as its list of columns. Tables keep
    the order in which they are declared.
    """

    COLUMN_KEYS = {"name", "type", "nullable", "size", "precision", "scale", "comment"}

    def __init__(self, schemas: Dict[str, Dict[str, Any]], dialect: Optional[str] = None):
        self.dialect = dialect
        self._schemas: Dict[str, Dict[str, TableRef]] = {}
        for db_schema, tables in (schemas or {}).items():
            self._schemas[db_schema] = {
                table_name: self._parse_table(db_schema, table_name, table_def)
                for table_name, table_def in (tables or {}).items()
            }

    @classmethod
    def from_file(cls, path: Union[str, Path], dialect: Optional[str] = None) -> "StaticMetadataSource":
        """Load descriptors from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Metadata file not found: {path}")
        return cls.from_yaml(path.read_text(encoding="utf-8"), dialect=dialect)

    @classmethod
    def from_yaml(cls, text: str, dialect: Optional[str] = None) -> "StaticMetadataSource":
        """Load descriptors from YAML text with a top-level `schemas` mapping."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML metadata: {e}")

        if not isinstance(data, dict) or not isinstance(data.get("schemas"), dict):
            raise ConfigError("Metadata document must contain a 'schemas' mapping")
        return cls(data["schemas"], dialect=dialect)

    def _parse_table(self, db_schema: str, table_name: str, table_def: Any) -> TableRef:
        if isinstance(table_def, list):
            table_def = {"columns": table_def}
        if not isinstance(table_def, dict):
            raise ConfigError(f"Table '{db_schema}.{table_name}' must be a mapping or a list")

        columns = []
        for raw in table_def.get("columns") or []:
            if not isinstance(raw, dict):
                raise ConfigError(f"Column in '{db_schema}.{table_name}' must be a mapping")
            unknown = set(raw) - self.COLUMN_KEYS
            if unknown:
                raise ConfigError(
                    f"Unknown column keys in '{db_schema}.{table_name}': {sorted(unknown)}"
                )
            if "name" not in raw or "type" not in raw:
                raise ConfigError(f"Column in '{db_schema}.{table_name}' needs 'name' and 'type'")
            self._check_column(db_schema, table_name, raw)
            columns.append(ColumnInfo(
                name=raw["name"],
                sql_type=str(raw["type"]),
                nullable=raw.get("nullable", True),
                size=raw.get("size"),
                precision=raw.get("precision"),
                scale=raw.get("scale"),
                comment=raw.get("comment"),
            ))

        return TableRef(
            db_schema=db_schema,
            name=table_name,
            columns=columns,
            comment=table_def.get("comment"),
        )

    def _check_column(self, db_schema: str, table_name: str, raw: Dict[str, Any]) -> None:
        where = f"column '{raw['name']}' of '{db_schema}.{table_name}'"
        if not isinstance(raw["name"], str):
            raise ConfigError(
                f"Column name in '{db_schema}.{table_name}' must be a string, got {raw['name']!r}"
            )
        if "nullable" in raw and not isinstance(raw["nullable"], bool):
            raise ConfigError(f"'nullable' of {where} must be true or false, got {raw['nullable']!r}")
        for key in ("size", "precision", "scale"):
            value = raw.get(key)
            # bool is an int subclass
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                raise ConfigError(f"'{key}' of {where} must be an integer, got {value!r}")

    def list_schemas(self) -> List[str]:
        return list(self._schemas)

    def list_tables(self, db_schema: str) -> List[str]:
        if db_schema not in self._schemas:
            raise SchemaNotFoundError(db_schema)
        return list(self._schemas[db_schema])

    def get_table(self, db_schema: str, table_name: str) -> TableRef:
        if db_schema not in self._schemas:
            raise SchemaNotFoundError(db_schema)
        try:
            return self._schemas[db_schema][table_name]
        except KeyError:
            raise TableNotFoundError(db_schema, table_name) from None
