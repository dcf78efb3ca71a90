"""
Schema parser module.

Recognizes schema document shapes and builds the model IR.
"""

from __future__ import annotations

from .conditional import ConditionalSchemaSplitter
from .schema_parser import SchemaParser

__all__ = [
    "SchemaParser",
    "ConditionalSchemaSplitter",
]
