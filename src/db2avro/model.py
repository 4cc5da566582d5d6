"""
db2avro - Avro Schema Model

In-memory representation of one Avro record schema:
- AvroType: primitive, date or decimal type plus a nullable flag
- AvroField: a named, typed field with an optional default
- AvroSchema: record name, namespace, ordered fields, custom properties

The string forms below are stable and used in tests and logs.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class Primitive:
    """A bare Avro primitive type (int, long, string, ...)."""
    kind: str

    def to_json(self) -> Any:
        return self.kind

    def __str__(self):
        return f"Primitive({self.kind})"


@dataclass(frozen=True)
class LogicalDate:
    """A date/time logical type encoded as a long."""
    encoding: str = "long"
    logical_name: str = "timestamp-millis"

    def to_json(self) -> Any:
        return {"type": self.encoding, "logicalType": self.logical_name}

    def __str__(self):
        return f"Date({self.encoding}): {self.logical_name}"


@dataclass(frozen=True)
class LogicalDecimal:
    """A decimal logical type with fixed precision and scale."""
    precision: int
    scale: int
    encoding: str = "string"
    logical_name: str = "decimal"

    def to_json(self) -> Any:
        return {
            "type": self.encoding,
            "logicalType": self.logical_name,
            "precision": self.precision,
            "scale": self.scale,
        }

    def __str__(self):
        return f"Decimal({self.encoding}): {self.logical_name}[{self.precision}:{self.scale}]"


TypeVariant = Union[Primitive, LogicalDate, LogicalDecimal]


@dataclass(frozen=True)
class AvroType:
    """Avro type of a field. Nullable types render as a union with null."""
    type: TypeVariant
    nullable: bool = False

    def to_json(self) -> Any:
        if self.nullable:
            return ["null", self.type.to_json()]
        return self.type.to_json()

    def as_nullable(self) -> "AvroType":
        if self.nullable:
            return self
        return AvroType(type=self.type, nullable=True)

    def __str__(self):
        return f"AvroType[type={self.type}, nullable={str(self.nullable).lower()}]"


class _NoDefault:
    """Marker for fields that carry no default value."""

    def __repr__(self):
        return "NO_DEFAULT"


NO_DEFAULT = _NoDefault()


@dataclass
class AvroField:
    """A single record field. `default=None` means a JSON null default."""
    name: str
    type: AvroType
    default: Any = NO_DEFAULT
    doc: Optional[str] = None

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    def __str__(self):
        return f"AvroField[name='{self.name}', type={self.type}]"


@dataclass
class AvroSchema:
    """
    One Avro record schema, built per table by the extractor.

    Only custom properties are expected to change after extraction
    (through the post-processor hook).
    """
    name: str
    namespace: Optional[str]
    fields: List[AvroField] = field(default_factory=list)
    custom_properties: Dict[str, str] = field(default_factory=dict)
    doc: Optional[str] = None

    @property
    def full_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def add_field(self, avro_field: AvroField) -> None:
        self.fields.append(avro_field)

    def get_field(self, name: str) -> Optional[AvroField]:
        for avro_field in self.fields:
            if avro_field.name == name:
                return avro_field
        return None

    def add_custom_property(self, name: str, value: str) -> "AvroSchema":
        """Attach an extra top-level JSON key. Re-adding a key keeps its position."""
        self.custom_properties[name] = value
        return self

    def __str__(self):
        fields = ", ".join(str(f) for f in self.fields)
        props = ", ".join(f"{k}={v}" for k, v in self.custom_properties.items())
        return (
            f"AvroSchema[name='{self.name}', namespace='{self.namespace}', "
            f"fields=[{fields}], customProperties={{{props}}}]"
        )
