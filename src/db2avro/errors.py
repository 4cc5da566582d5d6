"""
db2avro - Exceptions

Every failure raised by the package derives from Db2AvroError.
Driver errors (duckdb.Error) are not wrapped.
"""

from typing import Optional


class Db2AvroError(Exception):
    """Base exception for all db2avro errors."""
    pass


class UnsupportedTypeError(Db2AvroError):
    """Raised when a column's SQL type has no Avro mapping."""

    def __init__(self, sql_type: str, column: Optional[str] = None, reason: Optional[str] = None):
        self.sql_type = sql_type
        self.column = column
        message = f"Unsupported SQL type '{sql_type}'"
        if column:
            message += f" for column '{column}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class SchemaNotFoundError(Db2AvroError):
    """Raised when a database schema does not exist."""

    def __init__(self, db_schema: str):
        self.db_schema = db_schema
        super().__init__(f"Database schema '{db_schema}' not found")


class TableNotFoundError(Db2AvroError):
    """Raised when a table does not exist in the given database schema."""

    def __init__(self, db_schema: str, table_name: str):
        self.db_schema = db_schema
        self.table_name = table_name
        super().__init__(f"Table '{table_name}' not found in schema '{db_schema}'")


class InvalidNameError(Db2AvroError):
    """Raised when a schema, namespace or field name is not a valid Avro name."""

    def __init__(self, name: str, reason: str = "not a valid Avro name"):
        self.name = name
        super().__init__(f"Invalid name '{name}': {reason}")


class ConfigError(Db2AvroError):
    """Raised for invalid configuration files or values."""
    pass
