"""
Dart (de)serialization expression builders.

``cast_expr`` turns a field type into a function that wraps a source
expression read from a ``Map<String, dynamic>`` into a typed value;
``dump_expr`` is the ``toJson`` counterpart. Both recurse through array
item types by plain substitution, so nested shapes compose.
"""

from __future__ import annotations

from collections.abc import Callable

from ..analyzer.ir_nodes import FieldType, TypeKind

DART_TYPES = {
    TypeKind.STRING: "String",
    TypeKind.INTEGER: "int",
    TypeKind.FLOAT: "double",
    TypeKind.BOOLEAN: "bool",
    TypeKind.DATE_TIME: "DateTime",
    TypeKind.MAP: "Map<String, dynamic>",
}

ExprBuilder = Callable[[str], str]


def dart_type(field_type: FieldType) -> str:
    """Translate a field type to a Dart type (without nullability)."""
    if field_type.kind in DART_TYPES:
        return DART_TYPES[field_type.kind]
    if field_type.kind == TypeKind.ARRAY and field_type.item_type is not None:
        return f"List<{dart_type(field_type.item_type)}>"
    if field_type.kind == TypeKind.REFERENCE and field_type.reference:
        return field_type.reference
    return "dynamic"


def _null_guard(source: str, expr: str) -> str:
    return f"{source} != null ? {expr} : null"


def cast_expr(field_type: FieldType, nullable: bool) -> ExprBuilder:
    """
    Build the deserialization expression for a field type.

    Args:
        field_type: The field type
        nullable: Whether a null source value is allowed

    Returns:
        Function mapping a source expression (e.g. ``json['id']``) to Dart code
    """
    kind = field_type.kind

    if kind in (TypeKind.STRING, TypeKind.INTEGER, TypeKind.FLOAT, TypeKind.BOOLEAN):
        type_name = DART_TYPES[kind]
        mark = "?" if nullable else ""
        return lambda source: f"{source} as {type_name}{mark}"

    if kind == TypeKind.DATE_TIME:

        def date_time(source: str) -> str:
            expr = f"DateTime.parse({source} as String)"
            return _null_guard(source, expr) if nullable else expr

        return date_time

    if kind == TypeKind.ARRAY and field_type.item_type is not None:
        item_cast = cast_expr(field_type.item_type, False)

        def array(source: str) -> str:
            expr = f"({source} as List).map((e) => {item_cast('e')}).toList()"
            return _null_guard(source, expr) if nullable else expr

        return array

    if kind == TypeKind.REFERENCE and field_type.reference:
        ref = field_type.reference

        def reference(source: str) -> str:
            expr = f"{ref}.fromJson({source} as Map<String, dynamic>)"
            return _null_guard(source, expr) if nullable else expr

        return reference

    return lambda source: source


def dump_expr(field_type: FieldType, nullable: bool) -> ExprBuilder:
    """
    Build the serialization expression for a field type.

    Args:
        field_type: The field type
        nullable: Whether the value may be null

    Returns:
        Function mapping a value expression (e.g. ``createdAt``) to JSON-ready Dart code
    """
    access = "?." if nullable else "."
    kind = field_type.kind

    if kind == TypeKind.DATE_TIME:
        return lambda value: f"{value}{access}toIso8601String()"

    if kind == TypeKind.REFERENCE:
        return lambda value: f"{value}{access}toJson()"

    if kind == TypeKind.ARRAY and field_type.item_type is not None:
        item_dump = dump_expr(field_type.item_type, False)
        if item_dump("e") == "e":
            return lambda value: value
        return lambda value: f"{value}{access}map((e) => {item_dump('e')}).toList()"

    return lambda value: value
