"""
Base class for AST-based code generation backends.

Defines the interface that all language-specific backends implement, and
the model-level helpers they share (imports, variant naming, flattening
of discriminated models for the plain style).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ...utils import lower_camel_case, snake_to_pascal_case
from ..analyzer.ir_nodes import Field, FieldType, Model, UnionVariant
from ..analyzer.name_resolver import NameFormatter
from ..config import CodeGeneratorConfig
from ..errors import RenderError


class AstBackend(ABC):
    """Abstract base class for AST-based code generation backends."""

    # File extension
    FILE_EXTENSION: str = ""

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config
        self.name_formatter = NameFormatter(config.naming)

    @abstractmethod
    def render_file(self, models: list[Model], file_stem: str, local_names: set[str]) -> str:
        """
        Render one output unit.

        Args:
            models: Models declared in this unit
            file_stem: Stem of the output file (used for part/module names)
            local_names: Model names that need no import in this unit

        Returns:
            Generated source code
        """

    @abstractmethod
    def translate_type(self, field_type: FieldType, nullable: bool = False) -> str:
        """
        Translate an IR type to a language-specific type string.

        Args:
            field_type: The field type
            nullable: Whether to mark the type nullable

        Returns:
            Language-specific type string
        """

    @property
    def union_style(self) -> bool:
        return self.config.generate_discriminated_union

    def imported_names(self, models: list[Model], local_names: set[str]) -> list[str]:
        """Referenced model names that are declared outside this unit."""
        names: list[str] = []
        for model in models:
            for name in model.referenced_names():
                if name not in local_names and name not in names:
                    names.append(name)
        return names

    def variant_constructor_name(self, variant: UnionVariant) -> str:
        if variant.variant_name:
            return lower_camel_case(variant.variant_name)
        return "whenTrue" if variant.union_value else "whenFalse"

    def variant_class_name(self, model: Model, variant: UnionVariant) -> str:
        return model.name + snake_to_pascal_case(self.variant_constructor_name(variant))

    def default_variant(self, model: Model) -> UnionVariant | None:
        return next((v for v in model.union_variants or [] if v.is_default_variant), None)

    def check_union(self, model: Model) -> None:
        """
        Check the invariants of a discriminated model.

        Raises:
            RenderError: If the discriminator key is missing or a variant lacks it
        """
        if not model.union_key:
            raise RenderError(model.name, "discriminated model has no union key")
        if not model.union_variants:
            raise RenderError(model.name, "discriminated model has no variants")
        for variant in model.union_variants:
            if not any(f.name == model.union_key for f in variant.fields):
                raise RenderError(model.name, f"variant {self.variant_constructor_name(variant)} has no {model.union_key} field")

    def flattened_fields(self, model: Model) -> list[Field]:
        """
        Fields of a discriminated model rendered as a single record.

        Base fields come first, then each variant's fields (first occurrence
        wins); fields missing from some variant become nullable.
        """
        if not model.union_variants:
            return list(model.fields)

        fields = list(model.fields)
        seen = {f.name for f in fields}
        for variant in model.union_variants:
            for f in variant.fields:
                if f.name in seen:
                    continue
                seen.add(f.name)
                in_every_variant = all(any(o.name == f.name for o in v.fields) for v in model.union_variants)
                if in_every_variant:
                    fields.append(f)
                else:
                    fields.append(Field(name=f.name, type=f.type, is_nullable=True, description=f.description))
        return fields
