"""
Python (de)serialization expression builders.

Same contract as the Dart builders, but the expressions are ``ast`` nodes
so they can be dropped straight into the generated module tree.
"""

from __future__ import annotations

import ast
from collections.abc import Callable

from ..analyzer.ir_nodes import FieldType, TypeKind

PYTHON_TYPES = {
    TypeKind.STRING: "str",
    TypeKind.INTEGER: "int",
    TypeKind.FLOAT: "float",
    TypeKind.BOOLEAN: "bool",
    TypeKind.DATE_TIME: "datetime",
    TypeKind.MAP: "dict[str, Any]",
}

ExprBuilder = Callable[[ast.expr], ast.expr]


def python_type(field_type: FieldType) -> str:
    """Translate a field type to a Python annotation (without nullability)."""
    if field_type.kind in PYTHON_TYPES:
        return PYTHON_TYPES[field_type.kind]
    if field_type.kind == TypeKind.ARRAY and field_type.item_type is not None:
        return f"list[{python_type(field_type.item_type)}]"
    if field_type.kind == TypeKind.REFERENCE and field_type.reference:
        return field_type.reference
    return "Any"


def _name(identifier: str) -> ast.Name:
    return ast.Name(id=identifier, ctx=ast.Load())


def _call(func: ast.expr, *args: ast.expr) -> ast.Call:
    return ast.Call(func=func, args=list(args), keywords=[])


def _method(value: ast.expr, method: str, *args: ast.expr) -> ast.Call:
    return _call(ast.Attribute(value=value, attr=method, ctx=ast.Load()), *args)


def _cast(type_expr: ast.expr, source: ast.expr) -> ast.Call:
    return _call(_name("cast"), type_expr, source)


def _null_guard(source: ast.expr, expr: ast.expr) -> ast.IfExp:
    """``expr if source is not None else None``"""
    test = ast.Compare(left=source, ops=[ast.IsNot()], comparators=[ast.Constant(value=None)])
    return ast.IfExp(test=test, body=expr, orelse=ast.Constant(value=None))


def _list_comp(source: ast.expr, element: ast.expr) -> ast.ListComp:
    generator = ast.comprehension(target=ast.Name(id="e", ctx=ast.Store()), iter=source, ifs=[], is_async=0)
    return ast.ListComp(elt=element, generators=[generator])


def cast_expr(field_type: FieldType, nullable: bool) -> ExprBuilder:
    """
    Build the deserialization expression for a field type.

    Args:
        field_type: The field type
        nullable: Whether a None source value is allowed

    Returns:
        Function mapping a source expression (e.g. ``data["id"]``) to an expression node
    """
    kind = field_type.kind

    if kind in (TypeKind.STRING, TypeKind.INTEGER, TypeKind.FLOAT, TypeKind.BOOLEAN):
        type_name = PYTHON_TYPES[kind]

        def primitive(source: ast.expr) -> ast.expr:
            type_expr: ast.expr = _name(type_name)
            if nullable:
                type_expr = ast.BinOp(left=type_expr, op=ast.BitOr(), right=ast.Constant(value=None))
            return _cast(type_expr, source)

        return primitive

    if kind == TypeKind.DATE_TIME:

        def date_time(source: ast.expr) -> ast.expr:
            expr = _method(_name("datetime"), "fromisoformat", _cast(_name("str"), source))
            return _null_guard(source, expr) if nullable else expr

        return date_time

    if kind == TypeKind.ARRAY and field_type.item_type is not None:
        item_cast = cast_expr(field_type.item_type, False)

        def array(source: ast.expr) -> ast.expr:
            expr = _list_comp(_cast(_name("list"), source), item_cast(_name("e")))
            return _null_guard(source, expr) if nullable else expr

        return array

    if kind == TypeKind.REFERENCE and field_type.reference:
        ref = field_type.reference

        def reference(source: ast.expr) -> ast.expr:
            expr = _method(_name(ref), "from_dict", _cast(_name("dict"), source))
            return _null_guard(source, expr) if nullable else expr

        return reference

    return lambda source: source


def dump_expr(field_type: FieldType, nullable: bool) -> ExprBuilder:
    """
    Build the serialization expression for a field type.

    Args:
        field_type: The field type
        nullable: Whether the value may be None

    Returns:
        Function mapping a value expression (e.g. ``self.created_at``) to a JSON-ready expression
    """
    kind = field_type.kind

    if kind == TypeKind.DATE_TIME:

        def date_time(value: ast.expr) -> ast.expr:
            expr = _method(value, "isoformat")
            return _null_guard(value, expr) if nullable else expr

        return date_time

    if kind == TypeKind.REFERENCE:

        def reference(value: ast.expr) -> ast.expr:
            expr = _method(value, "to_dict")
            return _null_guard(value, expr) if nullable else expr

        return reference

    if kind == TypeKind.ARRAY and field_type.item_type is not None:
        item_dump = dump_expr(field_type.item_type, False)
        element = _name("e")
        if item_dump(element) is element:
            return lambda value: value

        def array(value: ast.expr) -> ast.expr:
            expr = _list_comp(value, item_dump(_name("e")))
            return _null_guard(value, expr) if nullable else expr

        return array

    return lambda value: value
