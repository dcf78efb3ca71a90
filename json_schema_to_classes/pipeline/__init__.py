"""
Pipeline - AST-based JSON Schema to data class generator.

This module provides a multi-phase architecture for generating data
classes from JSON schemas:

1. Phase 1 (Parser): Parse the JSON Schema document into the model IR
2. Phase 2 (Analyzer): Normalize names and check references
3. Phase 3 (AST Backend): Build Dart or Python declarations from the IR
4. Phase 4 (Serializer): Turn the declarations into source text
5. Phase 5 (Formatter): Optional black pass over Python output
6. Phase 6 (Writer): Atomic output writing
"""

from __future__ import annotations

from .config import CodeGeneratorConfig, FormatterConfig, NamingConfig
from .errors import (
    AmbiguousDiscriminatorError,
    DanglingReferenceError,
    MissingKeywordError,
    OutputError,
    RenderError,
    SchemaError,
    SchemaLoadError,
)
from .generator import PipelineGenerator, RenderResult
from .writer import OutputWriter, WriteReport

__all__ = [
    "PipelineGenerator",
    "RenderResult",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "NamingConfig",
    "OutputWriter",
    "WriteReport",
    "SchemaError",
    "AmbiguousDiscriminatorError",
    "MissingKeywordError",
    "DanglingReferenceError",
    "SchemaLoadError",
    "RenderError",
    "OutputError",
]
