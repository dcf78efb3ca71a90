"""
Pipeline generator - orchestrates parsing, analysis and rendering.

This is the main entry point of the pipeline:
1. Parse the JSON Schema document into the model IR
2. Normalize model names (reserved-suffix rename)
3. Optionally check that every reference points at a declared model
4. Render one buffer per model (split) or one combined buffer
5. Optionally format python output with black
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .analyzer.ir_nodes import Model, Schema
from .analyzer.name_resolver import normalize_model_names
from .analyzer.reference_resolver import ReferenceResolver
from .ast_backends import BACKENDS, AstBackend
from .config import CodeGeneratorConfig
from .errors import SchemaError
from .formatters import formatter_for
from .parser import SchemaParser
from .writer import output_path

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Rendered output units.

    ``files`` maps the unit name (file stem in split mode, the generator
    name otherwise) to its source text. ``errors`` maps the names of models
    that failed to render in split mode to the error raised.
    """

    files: dict[str, str] = field(default_factory=dict)
    errors: dict[str, SchemaError] = field(default_factory=dict)
    extension: str = ""

    @property
    def ok(self) -> bool:
        return not self.errors


class PipelineGenerator:
    """
    Code generator using the AST-based pipeline.

    Usage:
        generator = PipelineGenerator("task", schema_dict, config)
        code = generator.generate()
    """

    def __init__(
        self,
        name: str,
        schema: dict[str, Any] | Schema,
        config: CodeGeneratorConfig | None = None,
    ):
        """
        Initialize the generator.

        Args:
            name: Name of the combined output unit (also the Dart part stem)
            schema: Decoded JSON Schema document, or an already built Schema
            config: Code generation configuration

        Raises:
            SchemaError: If the document cannot be parsed
        """
        self.name = name
        self.config = config or CodeGeneratorConfig()

        if isinstance(schema, Schema):
            parsed = schema
        else:
            parsed = SchemaParser(self.config).parse(schema)

        self.schema = normalize_model_names(parsed, self.config.naming)
        logger.debug("Parsed %d models: %s", len(self.schema.models), ", ".join(self.schema.model_names()))

        if self.config.validate_references:
            ReferenceResolver(self.schema).check()

        self.backend: AstBackend = BACKENDS[self.config.language](self.config)
        self.formatter = formatter_for(self.config)

    def render(self, split: bool = False, output: str | Path | None = None) -> RenderResult:
        """
        Render the schema.

        Args:
            split: One output unit per model instead of one combined unit
            output: Output path or '*' template the units will be written to;
                generated files that name their own file (Dart parts) use its
                base name instead of the unit name

        Returns:
            RenderResult with the rendered units

        Raises:
            SchemaError: In single-file mode, the first rendering failure
        """
        result = RenderResult(extension=self.backend.FILE_EXTENSION)

        if not split:
            local_names = set(self.schema.model_names())
            file_stem = Path(output).stem if output is not None else self.name
            result.files[self.name] = self._render_unit(self.schema.models, file_stem, local_names)
            return result

        for model in self.schema.models:
            stem = self.backend.name_formatter.format_file_name_stem(model.name)
            file_stem = output_path(output, stem).stem if output is not None else stem
            try:
                result.files[stem] = self._render_unit([model], file_stem, {model.name})
            except SchemaError as e:
                logger.error("Failed to render %s: %s", model.name, e)
                result.errors[model.name] = e
        return result

    def generate(self) -> str:
        """Generate the combined output unit."""
        return self.render(split=False).files[self.name]

    def _render_unit(self, models: list[Model], file_stem: str, local_names: set[str]) -> str:
        code = self.backend.render_file(models, file_stem, local_names)
        if self.formatter is not None:
            code = self.formatter.format(code, self.config.formatter)
        return code
