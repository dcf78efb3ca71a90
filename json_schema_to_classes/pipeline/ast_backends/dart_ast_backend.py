"""
Dart AST-based code generation backend.

Generates Freezed data classes (discriminated-union style) or plain Dart
classes with hand-written fromJson/toJson from the model IR.
"""

from __future__ import annotations

import re
from pathlib import Path

import jinja2

from ...utils import lower_camel_case
from ..analyzer.ir_nodes import Field, FieldType, Model, UnionVariant
from ..config import CodeGeneratorConfig
from .base import AstBackend
from .dart_ast_nodes import (
    DartAnnotation,
    DartClass,
    DartConstructor,
    DartField,
    DartFile,
    DartMethod,
    DartParameter,
)
from .dart_expressions import cast_expr, dart_type, dump_expr

TEMPLATE_DIR = Path(__file__).parent.parent.parent / "templates" / "dart"

GENERATION_COMMENT = "// GENERATED CODE - DO NOT MODIFY MANUALLY"

DART_RESERVED_WORDS = {
    "assert", "break", "case", "catch", "class", "const", "continue", "default", "do", "else", "enum",
    "extends", "false", "final", "finally", "for", "if", "in", "is", "new", "null", "rethrow", "return",
    "super", "switch", "this", "throw", "true", "try", "var", "void", "while", "with",
}

_DART_IDENTIFIER = re.compile(r"^[A-Za-z$][A-Za-z0-9_$]*$")


def dart_string(value: str) -> str:
    """Single-quoted Dart string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("$", "\\$")
    return f"'{escaped}'"


def dart_identifier(name: str) -> str:
    """A valid public Dart identifier for a JSON property name."""
    if _DART_IDENTIFIER.match(name) and name not in DART_RESERVED_WORDS:
        return name
    identifier = lower_camel_case(name) or "value"
    if identifier[0].isdigit():
        identifier = "value" + identifier
    if identifier in DART_RESERVED_WORDS:
        identifier += "_"
    return identifier


def _comment_lines(text: str | None) -> list[str]:
    if not text:
        return []
    return [line.strip() for line in text.strip().splitlines()]


class DartAstBackend(AstBackend):
    """Dart code generation backend using custom AST nodes and Jinja2 templates."""

    FILE_EXTENSION = "dart"

    def __init__(self, config: CodeGeneratorConfig):
        super().__init__(config)
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        self.prefix_template = self.jinja_env.get_template("prefix.dart.jinja2")
        self.class_template = self.jinja_env.get_template("class.dart.jinja2")

    def render_file(self, models: list[Model], file_stem: str, local_names: set[str]) -> str:
        """Render the models of one output unit as a Dart library."""
        file = self.build_file(models, file_stem, local_names)

        sections: list[list[str]] = []
        if file.generation_comment:
            sections.append([file.generation_comment])
        for group in (file.package_imports, file.model_imports):
            if group:
                sections.append([f"import {dart_string(uri)};" for uri in group])
        if file.parts:
            sections.append([f"part {dart_string(part)};" for part in file.parts])

        prefix = self.prefix_template.render(sections=sections)
        classes = [self.class_template.render(cls=cls) for cls in file.classes]
        return prefix + "\n\n".join(classes) + "\n"

    def build_file(self, models: list[Model], file_stem: str, local_names: set[str]) -> DartFile:
        file = DartFile()
        if self.config.add_generation_comment:
            file.generation_comment = GENERATION_COMMENT

        if self.union_style:
            file.package_imports.append("package:freezed_annotation/freezed_annotation.dart")
            if self.config.include_serialization:
                file.package_imports.append("package:json_annotation/json_annotation.dart")
            file.parts.append(f"{file_stem}.freezed.dart")
            if self.config.include_serialization:
                file.parts.append(f"{file_stem}.g.dart")

        for name in self.imported_names(models, local_names):
            stem = self.name_formatter.format_file_name_stem(name)
            file.model_imports.append(f"../{stem}/{stem}.dart")

        for model in models:
            file.classes.append(self.build_class(model))
        return file

    def build_class(self, model: Model) -> DartClass:
        if not self.union_style:
            return self._build_plain_class(model)
        if model.is_union:
            return self._build_union_class(model)
        return self._build_freezed_class(model)

    def translate_type(self, field_type: FieldType, nullable: bool = False) -> str:
        type_name = dart_type(field_type)
        if nullable and type_name != "dynamic":
            return f"{type_name}?"
        return type_name

    def _json_key(self, f: Field) -> list[DartAnnotation]:
        if dart_identifier(f.name) == f.name or not self.config.include_serialization:
            return []
        return [DartAnnotation(name="JsonKey", arguments=[f"name: {dart_string(f.name)}"])]

    def _parameter(self, f: Field) -> DartParameter:
        return DartParameter(
            name=dart_identifier(f.name),
            type_name=dart_type(f.type),
            required=not f.is_nullable,
            nullable=f.is_nullable,
            annotations=self._json_key(f),
            comment=_comment_lines(f.description),
        )

    def _from_json_delegate(self, model: Model) -> DartMethod:
        return DartMethod(
            name="fromJson",
            lines=[f"factory {model.name}.fromJson(Map<String, dynamic> json) => _${model.name}FromJson(json);"],
        )

    def _build_freezed_class(self, model: Model) -> DartClass:
        cls = DartClass(
            name=model.name,
            comment=_comment_lines(model.description),
            annotations=[DartAnnotation(name="freezed")],
            mixins=[f"_${model.name}"],
        )
        cls.constructors.append(
            DartConstructor(
                class_name=model.name,
                is_const=True,
                is_factory=True,
                parameters=[self._parameter(f) for f in model.fields],
                redirect=f"_{model.name}",
            )
        )
        if self.config.include_serialization:
            cls.methods.append(self._from_json_delegate(model))
        return cls

    def _build_union_class(self, model: Model) -> DartClass:
        self.check_union(model)

        arguments = [f"unionKey: {dart_string(model.union_key)}"]
        default_variant = self.default_variant(model)
        if default_variant is not None:
            arguments.append(f"fallbackUnion: {dart_string(self.variant_constructor_name(default_variant))}")

        cls = DartClass(
            name=model.name,
            comment=_comment_lines(model.description),
            annotations=[DartAnnotation(name="Freezed", arguments=arguments)],
            mixins=[f"_${model.name}"],
        )

        # Private constructor marker
        cls.constructors.append(DartConstructor(class_name=model.name, name="_", is_const=True))

        for variant in model.union_variants:
            cls.constructors.append(self._variant_constructor(model, variant))

        if self.config.include_serialization:
            cls.methods.append(self._from_json_delegate(model))
        return cls

    def _variant_constructor(self, model: Model, variant: UnionVariant) -> DartConstructor:
        value = "true" if variant.union_value else "false"
        # Shared fields first, unless the variant redeclares them
        declared = {f.name for f in variant.fields}
        parameters = [self._parameter(f) for f in model.fields if f.name not in declared]
        for f in variant.fields:
            if f.name == model.union_key:
                parameters.append(
                    DartParameter(
                        name=dart_identifier(f.name),
                        type_name=dart_type(f.type),
                        annotations=[*self._json_key(f), DartAnnotation(name="Default", arguments=[value])],
                        comment=_comment_lines(f.description),
                    )
                )
            else:
                parameters.append(self._parameter(f))

        return DartConstructor(
            class_name=model.name,
            name=self.variant_constructor_name(variant),
            is_const=True,
            is_factory=True,
            parameters=parameters,
            redirect=f"_{self.variant_class_name(model, variant)}",
            annotations=[DartAnnotation(name="FreezedUnionValue", arguments=[dart_string(value)])],
        )

    def _build_plain_class(self, model: Model) -> DartClass:
        fields = self.flattened_fields(model)
        cls = DartClass(name=model.name, comment=_comment_lines(model.description))

        for f in fields:
            cls.fields.append(
                DartField(
                    name=dart_identifier(f.name),
                    type_name=self.translate_type(f.type, f.is_nullable),
                    comment=_comment_lines(f.description),
                )
            )

        cls.constructors.append(
            DartConstructor(
                class_name=model.name,
                parameters=[DartParameter(name=dart_identifier(f.name), required=not f.is_nullable, initializing=True) for f in fields],
            )
        )

        if self.config.include_serialization:
            cls.methods.append(self._from_json_method(model, fields))
            cls.methods.append(self._to_json_method(fields))
        return cls

    def _from_json_method(self, model: Model, fields: list[Field]) -> DartMethod:
        lines = [f"factory {model.name}.fromJson(Map<String, dynamic> json) {{"]
        if fields:
            lines.append(f"  return {model.name}(")
            for f in fields:
                cast = cast_expr(f.type, f.is_nullable)
                lines.append(f"    {dart_identifier(f.name)}: {cast(f'json[{dart_string(f.name)}]')},")
            lines.append("  );")
        else:
            lines.append(f"  return {model.name}();")
        lines.append("}")
        return DartMethod(name="fromJson", lines=lines)

    def _to_json_method(self, fields: list[Field]) -> DartMethod:
        lines = ["Map<String, dynamic> toJson() {", "  return {"]
        for f in fields:
            dump = dump_expr(f.type, f.is_nullable)
            lines.append(f"    {dart_string(f.name)}: {dump(dart_identifier(f.name))},")
        lines.extend(["  };", "}"])
        return DartMethod(name="toJson", lines=lines)
