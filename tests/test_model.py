"""
Schema model tests: string forms, defaults, custom properties.
"""

from db2avro import AvroField, AvroSchema, AvroType, LogicalDate, LogicalDecimal, Primitive
from db2avro.model import NO_DEFAULT


class TestAvroType:
    def test_string_forms(self):
        assert str(Primitive("int")) == "Primitive(int)"
        assert str(LogicalDate()) == "Date(long): timestamp-millis"
        assert str(LogicalDecimal(20, 3)) == "Decimal(string): decimal[20:3]"
        assert str(AvroType(Primitive("int"))) == "AvroType[type=Primitive(int), nullable=false]"

    def test_nullable_json_is_null_first_union(self):
        assert AvroType(Primitive("string"), nullable=True).to_json() == ["null", "string"]
        assert AvroType(Primitive("string")).to_json() == "string"

    def test_decimal_json(self):
        assert LogicalDecimal(20, 3).to_json() == {
            "type": "string",
            "logicalType": "decimal",
            "precision": 20,
            "scale": 3,
        }

    def test_as_nullable(self):
        avro_type = AvroType(LogicalDate())
        assert avro_type.as_nullable() == AvroType(LogicalDate(), nullable=True)
        assert avro_type.nullable is False


class TestAvroField:
    def test_no_default_by_default(self):
        avro_field = AvroField("id", AvroType(Primitive("int")))
        assert avro_field.default is NO_DEFAULT
        assert not avro_field.has_default

    def test_null_default(self):
        avro_field = AvroField("id", AvroType(Primitive("int"), nullable=True), default=None)
        assert avro_field.has_default


class TestAvroSchema:
    def test_custom_properties_keep_insertion_order(self):
        schema = AvroSchema("t", "ns")
        schema.add_custom_property("zeta", "1").add_custom_property("alpha", "2")
        schema.add_custom_property("zeta", "3")
        assert list(schema.custom_properties.items()) == [("zeta", "3"), ("alpha", "2")]

    def test_full_name(self):
        assert AvroSchema("t", "a.b").full_name == "a.b.t"
        assert AvroSchema("t", None).full_name == "t"

    def test_get_field(self):
        schema = AvroSchema("t", "ns", fields=[AvroField("id", AvroType(Primitive("int")))])
        assert schema.get_field("id").name == "id"
        assert schema.get_field("missing") is None
        assert schema.field_names == ["id"]

    def test_string_form(self):
        schema = AvroSchema("t", "ns", fields=[AvroField("id", AvroType(Primitive("int")))])
        schema.add_custom_property("owner", "data-eng")
        assert str(schema) == (
            "AvroSchema[name='t', namespace='ns', "
            "fields=[AvroField[name='id', type=AvroType[type=Primitive(int), nullable=false]]], "
            "customProperties={owner=data-eng}]"
        )
