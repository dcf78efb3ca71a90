from unittest import TestCase

from json_schema_to_classes.pipeline.analyzer import FieldType, NameFormatter, TypeKind, TypeResolver
from json_schema_to_classes.pipeline.errors import MissingKeywordError


class TestTypeResolver(TestCase):
    """Type keyword resolution"""

    def setUp(self):
        self.resolver = TypeResolver(NameFormatter())

    def test_primitives(self):
        self.assertEqual(self.resolver.resolve({"type": "string"}).kind, TypeKind.STRING)
        self.assertEqual(self.resolver.resolve({"type": "integer"}).kind, TypeKind.INTEGER)
        self.assertEqual(self.resolver.resolve({"type": "number"}).kind, TypeKind.FLOAT)
        self.assertEqual(self.resolver.resolve({"type": "boolean"}).kind, TypeKind.BOOLEAN)

    def test_date_time_format(self):
        self.assertEqual(self.resolver.resolve({"type": "string", "format": "date-time"}).kind, TypeKind.DATE_TIME)
        self.assertEqual(self.resolver.resolve({"type": "string", "format": "email"}).kind, TypeKind.STRING)

    def test_object_is_opaque_map(self):
        node = {"type": "object", "properties": {"x": {"type": "string"}}}
        self.assertEqual(self.resolver.resolve(node), FieldType(kind=TypeKind.MAP))

    def test_unknown(self):
        self.assertEqual(self.resolver.resolve({}).kind, TypeKind.UNKNOWN)
        self.assertEqual(self.resolver.resolve({"type": "null"}).kind, TypeKind.UNKNOWN)
        self.assertEqual(self.resolver.resolve({"type": ["string", "null"]}).kind, TypeKind.UNKNOWN)
        self.assertEqual(self.resolver.resolve("string").kind, TypeKind.UNKNOWN)

    def test_ref_uses_last_segment_and_formats_it(self):
        field_type = self.resolver.resolve({"$ref": "#/definitions/sub_task"})
        self.assertEqual(field_type.kind, TypeKind.REFERENCE)
        self.assertEqual(field_type.reference, "SubTask")

    def test_ref_takes_priority_over_type(self):
        field_type = self.resolver.resolve({"$ref": "#/definitions/Tag", "type": "string"})
        self.assertEqual(field_type.kind, TypeKind.REFERENCE)

    def test_ref_params_suffix(self):
        field_type = self.resolver.resolve({"$ref": "#/definitions/retry_params"})
        self.assertEqual(field_type.reference, "RetryAdapterParams")

    def test_nested_array(self):
        node = {"type": "array", "items": {"type": "array", "items": {"$ref": "#/definitions/Tag"}}}
        field_type = self.resolver.resolve(node)
        self.assertEqual(field_type.kind, TypeKind.ARRAY)
        self.assertEqual(field_type.item_type.kind, TypeKind.ARRAY)
        self.assertEqual(field_type.item_type.item_type.reference, "Tag")
        self.assertEqual(list(field_type.referenced_names()), ["Tag"])

    def test_array_without_items(self):
        with self.assertRaises(MissingKeywordError) as ctx:
            self.resolver.resolve({"type": "array"}, "#/properties/tags")
        self.assertEqual(ctx.exception.path, "#/properties/tags")
        self.assertIn("#/properties/tags", str(ctx.exception))

    def test_nested_array_without_items_reports_full_path(self):
        with self.assertRaises(MissingKeywordError) as ctx:
            self.resolver.resolve({"type": "array", "items": {"type": "array"}}, "#/properties/grid")
        self.assertEqual(ctx.exception.path, "#/properties/grid/items")
