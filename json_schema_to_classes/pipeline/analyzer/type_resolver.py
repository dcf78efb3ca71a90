"""
Type resolver for JSON Schema property nodes.

Maps a property schema to a normalized FieldType. Only the keyword subset
the pipeline understands is honored; anything else resolves to UNKNOWN.
"""

from __future__ import annotations

from typing import Any

from ..errors import MissingKeywordError
from .ir_nodes import FieldType, TypeKind
from .name_resolver import NameFormatter

SIMPLE_TYPES = {
    "integer": TypeKind.INTEGER,
    "number": TypeKind.FLOAT,
    "boolean": TypeKind.BOOLEAN,
    "object": TypeKind.MAP,
}


class TypeResolver:
    """Resolves property schemas to FieldTypes."""

    def __init__(self, name_formatter: NameFormatter | None = None):
        self.name_formatter = name_formatter or NameFormatter()

    def resolve(self, node: Any, path: str = "#") -> FieldType:
        """
        Resolve a property schema.

        Args:
            node: The property schema
            path: Location of the node in the document (for error messages)

        Returns:
            The resolved FieldType

        Raises:
            MissingKeywordError: If an array node has no ``items``
        """
        if not isinstance(node, dict):
            return FieldType(kind=TypeKind.UNKNOWN)

        if "$ref" in node:
            ref_name = str(node["$ref"]).split("/")[-1]
            return FieldType(kind=TypeKind.REFERENCE, reference=self.name_formatter.format_class_name(ref_name))

        type_name = node.get("type")

        if type_name == "string":
            if node.get("format") == "date-time":
                return FieldType(kind=TypeKind.DATE_TIME)
            return FieldType(kind=TypeKind.STRING)

        if type_name == "array":
            if node.get("items") is None:
                raise MissingKeywordError("items", path)
            return FieldType(kind=TypeKind.ARRAY, item_type=self.resolve(node["items"], f"{path}/items"))

        if isinstance(type_name, str) and type_name in SIMPLE_TYPES:
            return FieldType(kind=SIMPLE_TYPES[type_name])

        return FieldType(kind=TypeKind.UNKNOWN)
