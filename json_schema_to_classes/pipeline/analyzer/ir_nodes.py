"""
IR (Intermediate Representation) node definitions.

These nodes are the language-neutral model description produced by the
schema parser and consumed by the backends. Models point at each other by
name only, so cyclic references never need to be followed.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TypeKind(Enum):
    """Kind of a field type."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE_TIME = "dateTime"
    ARRAY = "array"
    MAP = "map"
    REFERENCE = "reference"
    ENUM = "enum"
    UNKNOWN = "unknown"


PRIMITIVE_KINDS = frozenset({TypeKind.STRING, TypeKind.INTEGER, TypeKind.FLOAT, TypeKind.BOOLEAN})


@dataclass
class FieldType:
    """A resolved field type."""

    kind: TypeKind = TypeKind.UNKNOWN

    # For arrays
    item_type: FieldType | None = None

    # For references: the formatted name of the target model
    reference: str | None = None

    def referenced_names(self) -> Iterator[str]:
        """Yield every model name reachable through this type."""
        if self.kind == TypeKind.REFERENCE and self.reference:
            yield self.reference
        elif self.kind == TypeKind.ARRAY and self.item_type is not None:
            yield from self.item_type.referenced_names()


@dataclass
class Field:
    """A named, typed member of a model."""

    name: str = ""
    type: FieldType = field(default_factory=FieldType)
    is_nullable: bool = False
    description: str | None = None

    # Carried for callers, never derived by the parser
    is_id: bool = False
    is_unique: bool = False
    attributes: dict[str, Any] | None = None


@dataclass
class UnionVariant:
    """One arm of a discriminated model."""

    variant_name: str | None = None
    union_value: bool = True

    # Own copy of the variant's fields, including the discriminator field
    fields: list[Field] = field(default_factory=list)

    is_default_variant: bool = False


@dataclass
class Model:
    """One generated data type."""

    name: str = ""
    fields: list[Field] = field(default_factory=list)
    description: str | None = None
    is_enum: bool = False
    is_abstract: bool = False

    # Set on the variants of a conditional schema
    parent_class: str | None = None

    # Set on the base of a conditional schema: discriminator key and
    # stringified discriminator value -> variant class name
    union_key: str | None = None
    union_cases: dict[str, str] | None = None

    # None for a flat model
    union_variants: list[UnionVariant] | None = None

    @property
    def is_union(self) -> bool:
        return self.union_variants is not None

    def all_fields(self) -> Iterator[Field]:
        """Yield the model's own fields followed by every variant field."""
        yield from self.fields
        for variant in self.union_variants or []:
            yield from variant.fields

    def referenced_names(self) -> list[str]:
        """Distinct referenced model names, in first-seen order."""
        names: list[str] = []
        for f in self.all_fields():
            for name in f.type.referenced_names():
                if name not in names:
                    names.append(name)
        return names


@dataclass
class Schema:
    """The result of parsing one schema document."""

    models: list[Model] = field(default_factory=list)
    version: str | None = None
    metadata: dict[str, Any] | None = None

    def model_names(self) -> list[str]:
        return [model.name for model in self.models]

    def get_model(self, name: str) -> Model | None:
        return next((model for model in self.models if model.name == name), None)
