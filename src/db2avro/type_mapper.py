"""
db2avro - SQL to Avro Type Mapping

Maps a raw column descriptor to an AvroType:
- integral types -> int / long by width
- character types -> string
- boolean -> boolean
- floating types -> float / double by width
- date and timestamp types -> long with logicalType timestamp-millis
- decimal / numeric -> string with logicalType decimal[precision:scale]
- money / smallmoney -> the same decimal with fixed bounds (19:4, 10:4)

SQL type names are normalized with sqlglot, so dialect spellings such as
INTEGER, int4, CHARACTER VARYING, DOUBLE PRECISION or NUMERIC(20,3)
resolve to one canonical type. Anything unmapped raises
UnsupportedTypeError; there is no fallback type.
"""

from typing import List, Optional, Tuple

from sqlglot import exp
from sqlglot.errors import SqlglotError

from .config import AvroConfig
from .errors import UnsupportedTypeError
from .model import AvroType, LogicalDate, LogicalDecimal, Primitive
from .sources import ColumnInfo


# Keyed by sqlglot DataType.Type member name
PRIMITIVE_TYPES = {
    # Integral, by width
    "TINYINT": "int",
    "UTINYINT": "int",
    "SMALLINT": "int",
    "USMALLINT": "int",
    "MEDIUMINT": "int",
    "UMEDIUMINT": "int",
    "INT": "int",
    "SERIAL": "int",
    "SMALLSERIAL": "int",
    "UINT": "long",
    "BIGINT": "long",
    "UBIGINT": "long",
    "BIGSERIAL": "long",
    # Character
    "CHAR": "string",
    "NCHAR": "string",
    "VARCHAR": "string",
    "NVARCHAR": "string",
    "BPCHAR": "string",
    "TEXT": "string",
    "TINYTEXT": "string",
    "MEDIUMTEXT": "string",
    "LONGTEXT": "string",
    "NAME": "string",
    "UUID": "string",
    # Boolean
    "BOOLEAN": "boolean",
    "BIT": "boolean",
    # Floating, by width
    "FLOAT": "float",
    "DOUBLE": "double",
}

DATE_TYPES = {
    "DATE",
    "DATE32",
    "DATETIME",
    "DATETIME64",
    "TIMESTAMP",
    "TIMESTAMPTZ",
    "TIMESTAMPLTZ",
    "TIMESTAMPNTZ",
    "TIMESTAMP_S",
    "TIMESTAMP_MS",
    "TIMESTAMP_NS",
}

DECIMAL_TYPES = {"DECIMAL", "DECIMAL32", "DECIMAL64", "DECIMAL128", "DECIMAL256", "MONEY", "SMALLMONEY"}

# Currency types carry no parameters; bounds as in SQL Server
MONEY_BOUNDS = {
    "MONEY": (19, 4),
    "SMALLMONEY": (10, 4),
}


def parse_sql_type(sql_type: str, dialect: Optional[str] = None,
                   column: Optional[str] = None) -> exp.DataType:
    """
    Parse a SQL type name into a sqlglot DataType.

    Raises:
        UnsupportedTypeError: if sqlglot cannot parse the type name
    """
    try:
        data_type = exp.DataType.build(sql_type, dialect=dialect)
    except (SqlglotError, ValueError) as e:
        raise UnsupportedTypeError(sql_type, column, reason=str(e)) from e

    if not isinstance(data_type, exp.DataType) or not isinstance(data_type.this, exp.DataType.Type):
        raise UnsupportedTypeError(sql_type, column, reason="not a data type")
    return data_type


def _type_params(data_type: exp.DataType) -> List[int]:
    """Numeric parameters of a type, e.g. [20, 3] for NUMERIC(20,3)."""
    params = []
    for param in data_type.expressions:
        try:
            params.append(int(param.name))
        except (TypeError, ValueError):
            continue
    return params


def _decimal_bounds(column: ColumnInfo, data_type: exp.DataType) -> Tuple[int, int]:
    params = _type_params(data_type)

    fixed = MONEY_BOUNDS.get(data_type.this.name)

    precision = column.precision
    if precision is None and params:
        precision = params[0]
    if precision is None and fixed:
        precision = fixed[0]
    if precision is None:
        raise UnsupportedTypeError(
            column.sql_type, column.name, reason="decimal without precision"
        )

    scale = column.scale
    if scale is None:
        if len(params) > 1:
            scale = params[1]
        elif fixed:
            scale = fixed[1]
        else:
            scale = 0

    if precision <= 0 or scale < 0 or scale > precision:
        raise UnsupportedTypeError(
            column.sql_type, column.name,
            reason=f"invalid decimal bounds precision={precision} scale={scale}",
        )
    return precision, scale


def map_column(column: ColumnInfo, config: AvroConfig, dialect: Optional[str] = None) -> AvroType:
    """
    Map one column descriptor to its Avro type.

    Args:
        column: Raw column descriptor
        config: Supplies nullable_true_by_default
        dialect: sqlglot dialect used to read the type name

    Returns:
        AvroType whose nullable flag is column.nullable OR
        config.nullable_true_by_default

    Raises:
        UnsupportedTypeError: for unknown or unparsable SQL types
    """
    data_type = parse_sql_type(column.sql_type, dialect=dialect, column=column.name)
    kind = data_type.this.name
    nullable = bool(column.nullable or config.nullable_true_by_default)

    if kind in PRIMITIVE_TYPES:
        variant = Primitive(PRIMITIVE_TYPES[kind])
    elif kind in DATE_TYPES:
        variant = LogicalDate()
    elif kind in DECIMAL_TYPES:
        precision, scale = _decimal_bounds(column, data_type)
        variant = LogicalDecimal(precision=precision, scale=scale)
    else:
        raise UnsupportedTypeError(column.sql_type, column.name)

    return AvroType(type=variant, nullable=nullable)
