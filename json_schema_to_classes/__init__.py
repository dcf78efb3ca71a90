"""JSON Schema to data classes

A Python package for generating data classes from JSON Schema definitions.
Supports Dart (Freezed) and Python (dataclasses) output with an AST-based
pipeline, conditional-schema decomposition and optional serialization code.
"""

__version__ = "0.1.0"

from .loader import load_schema
from .pipeline import (
    CodeGeneratorConfig,
    FormatterConfig,
    NamingConfig,
    OutputWriter,
    PipelineGenerator,
    RenderResult,
    SchemaError,
)

__all__ = [
    "PipelineGenerator",
    "RenderResult",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "NamingConfig",
    "OutputWriter",
    "SchemaError",
    "load_schema",
]
