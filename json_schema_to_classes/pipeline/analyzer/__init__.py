"""
Analyzer module.

Contains the IR nodes, type resolution, name formatting and reference checks.
"""

from __future__ import annotations

from .ir_nodes import Field, FieldType, Model, Schema, TypeKind, UnionVariant
from .name_resolver import NameFormatter, normalize_model_names
from .reference_resolver import ReferenceReport, ReferenceResolver
from .type_resolver import TypeResolver

__all__ = [
    "Schema",
    "Model",
    "Field",
    "FieldType",
    "TypeKind",
    "UnionVariant",
    "NameFormatter",
    "normalize_model_names",
    "ReferenceResolver",
    "ReferenceReport",
    "TypeResolver",
]
