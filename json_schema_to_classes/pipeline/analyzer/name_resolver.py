"""
Name resolution for generated classes and output files.

Converts schema keys and titles to PascalCase class names, derives
snake_case file stems from class names, and applies the reserved
``Params`` suffix rule consistently to declarations and references.
"""

from __future__ import annotations

import dataclasses
import logging

from ...utils import pascal_to_snake_case, snake_to_pascal_case
from ..config import NamingConfig
from .ir_nodes import Field, FieldType, Model, Schema, TypeKind, UnionVariant

logger = logging.getLogger(__name__)


class NameFormatter:
    """Formats class names and file-name stems."""

    def __init__(self, naming: NamingConfig | None = None):
        self.naming = naming or NamingConfig()

    def format_class_name(self, raw: str) -> str:
        """
        Convert a schema key or title to a class name.

        Args:
            raw: Arbitrary schema key ("task_params", "isPriority", "Foo_Bar")

        Returns:
            PascalCase name with a trailing ``Params`` replaced by ``AdapterParams``
        """
        return self.apply_suffix_rule(snake_to_pascal_case(raw))

    def apply_suffix_rule(self, class_name: str) -> str:
        """Replace the reserved suffix once; already-replaced names are kept."""
        suffix = self.naming.params_suffix
        replacement = self.naming.params_replacement
        if class_name.endswith(suffix):
            return class_name[: -len(suffix)] + replacement
        return class_name

    def needs_rename(self, class_name: str) -> bool:
        return class_name.endswith(self.naming.params_suffix) and not class_name.endswith(self.naming.params_replacement)

    def format_file_name_stem(self, class_name: str) -> str:
        """
        Derive the output file stem of a class.

        Args:
            class_name: A formatted class name ("TaskAdapterParams")

        Returns:
            snake_case stem with the first matching suffix rule applied ("task_adapter")
        """
        stem = pascal_to_snake_case(class_name)
        for suffix, replacement in self.naming.file_stem_suffixes.items():
            if stem.endswith(suffix):
                return stem[: -len(suffix)] + replacement
        return stem


def normalize_model_names(schema: Schema, naming: NamingConfig | None = None) -> Schema:
    """
    Apply the reserved-suffix rename to every model of a schema.

    Models whose name ends in ``Params`` (but not already in ``AdapterParams``)
    are renamed, and every reference, parent class and union case pointing at
    the old name follows. The input schema is left untouched.

    Args:
        schema: Parsed schema
        naming: Naming conventions

    Returns:
        A new Schema; running the pass twice gives the same result as once
    """
    formatter = NameFormatter(naming)
    renames = {model.name: formatter.apply_suffix_rule(model.name) for model in schema.models if formatter.needs_rename(model.name)}
    if not renames:
        return schema

    for old, new in renames.items():
        logger.debug("Renaming model %s -> %s", old, new)

    def rename(name: str | None) -> str | None:
        return renames.get(name, name) if name is not None else None

    def rename_type(field_type: FieldType) -> FieldType:
        if field_type.kind == TypeKind.REFERENCE:
            return dataclasses.replace(field_type, reference=rename(field_type.reference))
        if field_type.kind == TypeKind.ARRAY and field_type.item_type is not None:
            return dataclasses.replace(field_type, item_type=rename_type(field_type.item_type))
        return field_type

    def rename_fields(fields: list[Field]) -> list[Field]:
        return [dataclasses.replace(f, type=rename_type(f.type)) for f in fields]

    models = []
    for model in schema.models:
        variants = None
        if model.union_variants is not None:
            variants = [
                UnionVariant(
                    variant_name=v.variant_name,
                    union_value=v.union_value,
                    fields=rename_fields(v.fields),
                    is_default_variant=v.is_default_variant,
                )
                for v in model.union_variants
            ]
        cases = None
        if model.union_cases is not None:
            cases = {value: rename(class_name) for value, class_name in model.union_cases.items()}
        models.append(
            dataclasses.replace(
                model,
                name=rename(model.name),
                fields=rename_fields(model.fields),
                parent_class=rename(model.parent_class),
                union_cases=cases,
                union_variants=variants,
            )
        )

    return Schema(models=models, version=schema.version, metadata=schema.metadata)
